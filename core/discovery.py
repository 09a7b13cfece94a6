"""
core/discovery.py
-----------------
Find cartridges in a package via pkgutil.

A module contributes either every Cartridge subclass it defines (one
instance each) or, when it has a module-level draw(), the module itself.
"""

import importlib
import inspect
import pkgutil
from typing import List, Tuple

import showlog
from core.cartridge import Cartridge


def _cartridges_in(mod) -> list:
    found = []
    for _, obj in inspect.getmembers(mod, inspect.isclass):
        if obj is Cartridge or not issubclass(obj, Cartridge):
            continue
        # imported base classes belong to their own module
        if obj.__module__ != mod.__name__:
            continue
        found.append(obj())
    if not found and callable(getattr(mod, "draw", None)):
        found.append(mod)
    return found


def discover_cartridges(package: str = "cartridges") -> List[Tuple[str, object]]:
    """
    Import every module in a package and collect its cartridges.

    Args:
        package: Dotted package name to scan (default: "cartridges")

    Returns:
        list: (module_name, cartridge) pairs in module order
    """
    try:
        pkg = importlib.import_module(package)
    except ImportError as e:
        showlog.error(f"[DISCOVERY] Cannot import cartridge package '{package}': {e}")
        return []

    search_path = getattr(pkg, "__path__", None)
    if search_path is None:
        showlog.warn(f"[DISCOVERY] '{package}' is a module, not a package")
        return []

    results = []
    for _, name, ispkg in sorted(pkgutil.iter_modules(search_path), key=lambda m: m[1]):
        if name.startswith("_"):
            continue
        try:
            mod = importlib.import_module(f"{package}.{name}")
            cartridges = _cartridges_in(mod)
        except Exception as e:
            showlog.error(f"[DISCOVERY] Failed to load cartridge module '{name}': {e}")
            continue

        if not cartridges:
            showlog.debug(f"[DISCOVERY] {package}.{name} defines no cartridge (skipping)")
            continue
        for cartridge in cartridges:
            results.append((name, cartridge))

    showlog.info(f"[DISCOVERY] Found {len(results)} cartridge(s) in '{package}'")
    return results
