"""Docstring completeness checks for parameters and return values."""

from __future__ import annotations

import inspect
import pkgutil
from types import ModuleType
from typing import Iterable, List, Set

import pytest
from numpydoc.docscrape import NumpyDocString

import courtside

"""Numpydoc coverage checks for every courtside module, class and function."""

import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import Dict, List, Optional, Set

import pytest
from numpydoc.docscrape import NumpyDocString

import courtside

_UNDOCUMENTED_PARAMETERS = {"self", "cls"}
_NONE_ANNOTATIONS = {"none", "nonetype", "typing.none", "builtins.none", "builtins.nonetype"}


def _courtside_modules() -> List[ModuleType]:
    modules = [courtside]
    for info in pkgutil.walk_packages(courtside.__path__, prefix="courtside."):
        modules.append(importlib.import_module(info.name))
    return modules


def _owned(obj: object, module_name: str) -> bool:
    return getattr(obj, "__module__", None) == module_name


def _documentable(modules: List[ModuleType]) -> Dict[str, object]:
    """Map qualified names to the functions, classes and methods a module defines."""
    found: Dict[str, object] = {}
    for module in modules:
        for name, obj in vars(module).items():
            if name.startswith("__") or not _owned(obj, module.__name__):
                continue
            if inspect.isfunction(obj):
                found[f"{module.__name__}.{obj.__qualname__}"] = obj
            elif inspect.isclass(obj):
                found[f"{module.__name__}.{obj.__qualname__}"] = obj
                for attr_name, attr in vars(obj).items():
                    if attr_name.startswith("__"):
                        continue
                    if isinstance(attr, (staticmethod, classmethod)):
                        attr = attr.__func__
                    if inspect.isfunction(attr) and _owned(attr, module.__name__):
                        found[f"{module.__name__}.{attr.__qualname__}"] = attr
    return found


def _parsed(obj: object) -> Optional[NumpyDocString]:
    docstring = inspect.getdoc(obj)
    return NumpyDocString(docstring) if docstring else None


def _parameters_needing_docs(obj: object) -> List[str]:
    try:
        signature = inspect.signature(obj)
    except (TypeError, ValueError):
        return []
    return [
        p.name
        for p in signature.parameters.values()
        if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD) and p.name not in _UNDOCUMENTED_PARAMETERS
    ]


def _returns_value(obj: object) -> bool:
    if inspect.isclass(obj):
        return False
    annotation = inspect.signature(obj).return_annotation
    if annotation is inspect.Signature.empty or annotation in (None, type(None)):
        return False
    if isinstance(annotation, str) and annotation.strip().lower() in _NONE_ANNOTATIONS:
        return False
    return True


_MODULES = _courtside_modules()
_OBJECTS = _documentable(_MODULES)


class TestModuleDocstrings:
    """Every module explains what it holds."""

    @pytest.mark.parametrize("module", _MODULES, ids=lambda m: m.__name__)
    def test_module_has_docstring(self, module: ModuleType) -> None:
        """Modules carry a non-empty summary line."""
        assert (module.__doc__ or "").strip(), f"{module.__name__} has no module docstring"


class TestCallableDocstrings:
    """Parameters and return values are described in numpydoc sections."""

    @pytest.mark.parametrize("qualname", sorted(_OBJECTS))
    def test_parameters_are_documented(self, qualname: str) -> None:
        """Each signature parameter has a Parameters entry."""
        obj = _OBJECTS[qualname]
        expected = _parameters_needing_docs(obj)
        if not expected:
            pytest.skip("No parameters requiring documentation")
        parsed = _parsed(obj)
        documented: Set[str] = {name for name, _, _ in parsed["Parameters"]} if parsed else set()
        missing = [name for name in expected if name not in documented]
        assert not missing, f"{qualname} is missing parameter entries: {', '.join(missing)}"

    @pytest.mark.parametrize("qualname", sorted(_OBJECTS))
    def test_returns_are_documented(self, qualname: str) -> None:
        """Callables annotated with a value have a Returns section."""
        obj = _OBJECTS[qualname]
        if not _returns_value(obj):
            pytest.skip("Return value does not require documentation")
        parsed = _parsed(obj)
        assert parsed is not None and parsed["Returns"], f"{qualname} is missing a Returns section"
