"""
Model field introspection.

Answers two questions about a model class without instantiating it:
which members does it declare, and what type does a given member hold.
Pydantic models, dataclasses and plainly annotated classes (including
SQLAlchemy declarative models using ``Mapped[...]``) are understood.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import inspect
import sys
import types
import typing
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin

from pydantic import BaseModel

_CLASSVAR_PREFIXES = ("ClassVar", "typing.ClassVar", "t.ClassVar")


def declared_fields(model: Any) -> dict[str, Any]:
    """
    Return ``{name: annotation}`` for every public member *model* declares.

    Annotations may still be unevaluated strings; see :func:`member_type`.
    An empty dict means the model declares nothing we can check against.
    """
    if not isinstance(model, type):
        return {}

    if issubclass(model, BaseModel):
        return {name: info.annotation for name, info in model.model_fields.items()}

    if dataclasses.is_dataclass(model):
        return {f.name: f.type for f in dataclasses.fields(model)}

    fields: dict[str, Any] = {}
    for klass in reversed(model.__mro__):
        if klass is object:
            continue
        try:
            annotations = inspect.get_annotations(klass)
        except NameError:
            continue
        for name, annotation in annotations.items():
            if name.startswith("_") or _is_classvar(annotation):
                continue
            fields[name] = annotation
    return fields


def member_type(model: Any, name: str) -> tuple[Any, bool]:
    """
    Resolve the declared type of ``model.name``.

    Returns ``(property_type, is_collection)`` where *property_type* is
    the element type for collection members.  Unknown members resolve to
    ``(Any, False)``.
    """
    annotation = declared_fields(model).get(name)
    if annotation is None:
        return Any, False
    return unwrap_annotation(_evaluate(annotation, model))


def unwrap_annotation(annotation: Any) -> tuple[Any, bool]:
    """Strip ``Optional``/``Mapped``-style wrappers and collection containers."""
    is_collection = False
    while True:
        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is Annotated:
            annotation = args[0]
            continue

        if origin is Union or origin is types.UnionType:
            candidates = [a for a in args if a is not type(None)]
            if len(candidates) != 1:
                break
            annotation = candidates[0]
            continue

        container = origin if origin is not None else annotation
        if _is_collection_type(container):
            is_collection = True
            annotation = args[0] if args else Any
            continue

        if origin is not None and len(args) == 1:
            annotation = args[0]
            continue
        break
    return annotation, is_collection


def _is_collection_type(candidate: Any) -> bool:
    if not isinstance(candidate, type):
        return False
    if issubclass(candidate, str | bytes | collections.abc.Mapping):
        return False
    return issubclass(candidate, collections.abc.Collection)


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(_CLASSVAR_PREFIXES)
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _evaluate(annotation: Any, owner: type) -> Any:
    if not isinstance(annotation, str):
        return annotation

    module = sys.modules.get(owner.__module__)
    namespace: dict[str, Any] = dict(vars(module)) if module is not None else {}
    namespace.setdefault(owner.__name__, owner)
    holder = type("_AnnotationHolder", (), {"__annotations__": {"value": annotation}})
    try:
        return typing.get_type_hints(holder, globalns=namespace)["value"]
    except (NameError, SyntaxError, TypeError):
        return Any
