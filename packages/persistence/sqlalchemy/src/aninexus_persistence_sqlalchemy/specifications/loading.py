"""
Eager-loading options for include directives.

``build_loader_option(User, "teams.team.roles", "selectin")`` walks the
mapper relationships hop by hop and returns
``selectinload(User.teams).selectinload(Membership.team).selectinload(Team.roles)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, cast

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import joinedload, selectinload

from aninexus_specifications.exceptions import (
    FieldNotFoundError,
    RelationshipTraversalError,
)

from ..exceptions import IncludePathError

if TYPE_CHECKING:
    from sqlalchemy.orm import Mapper
    from sqlalchemy.orm.strategy_options import _AbstractLoad

LoaderStrategy = Literal["joined", "selectin"]

_LOADERS = {
    "joined": joinedload,
    "selectin": selectinload,
}


def check_loader_strategy(strategy: str) -> LoaderStrategy:
    if strategy not in _LOADERS:
        raise ValueError(
            f"Unknown loader strategy '{strategy}'; "
            f"expected one of {', '.join(sorted(_LOADERS))}"
        )
    return cast("LoaderStrategy", strategy)


def build_loader_option(
    model: type[Any],
    path: str,
    strategy: LoaderStrategy = "joined",
) -> _AbstractLoad:
    """
    Build a chained loader option for a dotted relationship *path*.

    Raises:
        IncludePathError: If *path* is empty or has an empty segment.
        FieldNotFoundError: If a segment is not mapped on its model.
        RelationshipTraversalError: If a segment is a column, not a
            relationship.
    """
    loader = _LOADERS[check_loader_strategy(strategy)]
    segments = path.split(".") if path else []
    if not segments or any(not s for s in segments):
        raise IncludePathError(path, "path must be dot-separated member names")

    option: Any = None
    current = model
    for name in segments:
        mapper = cast("Mapper[Any]", sa_inspect(current))
        if name not in mapper.relationships:
            if name in mapper.all_orm_descriptors:
                raise RelationshipTraversalError(
                    name, current.__name__, full_path=path
                )
            raise FieldNotFoundError(
                name,
                current.__name__,
                [k for k in mapper.all_orm_descriptors.keys() if k[:1] != "_"],
                full_path=path,
            )
        attribute = getattr(current, name)
        if option is None:
            option = loader(attribute)
        else:
            option = getattr(option, loader.__name__)(attribute)
        current = mapper.relationships[name].mapper.class_
    return cast("_AbstractLoad", option)
