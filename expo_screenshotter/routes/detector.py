"""Expo Router route discovery by scanning the ``app/`` directory."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol

import structlog

from expo_screenshotter.models.config import View

logger = structlog.get_logger(__name__)

LAYOUT_FILENAMES = ("_layout.tsx", "_layout.js", "_layout.jsx")
ROUTE_SUFFIXES = {".js", ".jsx", ".ts", ".tsx"}
SAMPLE_PARAM_VALUE = "123"

STACK_SCREEN_RE = re.compile(r"""<Stack\.Screen[^>]*name=["']([^"']+)["'][^>]*""")
TABS_SCREEN_RE = re.compile(
    r"""<Tabs\.Screen[^>]*name=["']([^"']+)["'][^>]*options={[^}]*title:\s*["']([^"']+)["']"""
)
DYNAMIC_SEGMENT_RE = re.compile(r"\[([^\]]+)\]")


class RouteProvider(Protocol):
    def detect(self) -> list[View]: ...


def _is_group(name: str) -> bool:
    return name.startswith("(") and name.endswith(")")


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def _join(route_path: str, segment: str) -> str:
    return f"{route_path}/{segment}"


def _read_layout(directory: Path) -> str:
    for filename in LAYOUT_FILENAMES:
        layout = directory / filename
        if layout.is_file():
            return layout.read_text(encoding="utf-8")
    return ""


def _imports_router_module(source: str, module: str) -> bool:
    return f"from '{module}'" in source or f'from "{module}"' in source


class ExpoRouterRouteProvider:
    """Builds the list of views from an Expo Router file tree.

    Group folders like ``(tabs)`` do not add a path segment, and dynamic
    ``[param]`` folders become a sample route with the parameter set to 123.
    """

    def __init__(self, app_dir: Path | str = "app") -> None:
        self._app_dir = Path(app_dir)

    def detect(self) -> list[View]:
        logger.info("scanning_routes", app_dir=str(self._app_dir))
        if not self._app_dir.is_dir():
            logger.warning("app_dir_not_found", app_dir=str(self._app_dir))
            return []

        routes: list[tuple[str, str]] = [("Home", "/")]

        for name in STACK_SCREEN_RE.findall(_read_layout(self._app_dir)):
            if not name or name.startswith("+"):
                continue
            if _is_group(name):
                logger.debug("tab_group_found", group=name)
            else:
                routes.append((_capitalize(name), f"/{name}"))

        self._scan(self._app_dir, "", routes)
        views = self._process(routes)
        logger.info("routes_found", count=len(views))
        return views

    def _scan(self, directory: Path, route_path: str, routes: list[tuple[str, str]]) -> None:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
        files = [p for p in entries if p.is_file()]
        subdirs = [p for p in entries if p.is_dir()]

        is_group = _is_group(directory.name)
        is_tabs = directory.name == "(tabs)"

        if any(f.name in LAYOUT_FILENAMES for f in files):
            self._scan_layout(_read_layout(directory), route_path, is_tabs, routes)

        for file in files:
            if (
                "_layout" in file.name
                or file.name.startswith("+")
                or file.suffix not in ROUTE_SUFFIXES
            ):
                continue
            route_name = file.stem
            if route_name.startswith(("_", ".")):
                continue
            # Screens inside a group are declared by the group's layout
            if is_group or route_name.startswith("[") or route_name.endswith("]"):
                continue
            if route_name == "index":
                routes.append((directory.name or "Home", route_path or "/"))
            else:
                routes.append((route_name, _join(route_path, route_name)))

        for subdir in subdirs:
            name = subdir.name
            if name.startswith(".") or name == "node_modules":
                continue
            if _is_group(name):
                self._scan(subdir, route_path, routes)
                continue
            segment = name
            match = DYNAMIC_SEGMENT_RE.fullmatch(name)
            if match:
                segment = DYNAMIC_SEGMENT_RE.sub(SAMPLE_PARAM_VALUE, name, count=1)
                label = f"{directory.name or 'Route'}/{match.group(1)}"
                routes.append((label, _join(route_path, segment)))
            # Routes below a dynamic folder use the sample value too
            self._scan(subdir, _join(route_path, segment), routes)

    def _scan_layout(
        self, layout: str, route_path: str, is_tabs: bool, routes: list[tuple[str, str]]
    ) -> None:
        if not layout:
            return
        if is_tabs or _imports_router_module(layout, "expo-router/tabs"):
            for name, title in TABS_SCREEN_RE.findall(layout):
                path = "/" if name == "index" else f"/{name}"
                routes.append((f"Tab {title or name}", path))
        elif "<Stack" in layout or _imports_router_module(layout, "expo-router/stack"):
            for name in STACK_SCREEN_RE.findall(layout):
                if name.startswith("+") or _is_group(name):
                    continue
                routes.append((_capitalize(name), _join(route_path, name)))

    def _process(self, routes: list[tuple[str, str]]) -> list[View]:
        """Deduplicate by path (first wins), sort by path, and tidy names."""
        unique: dict[str, str] = {}
        for name, path in routes:
            unique.setdefault(path, name)

        views = []
        for path in sorted(unique):
            name = unique[path]
            parts = [part for part in path.split("/") if part]
            if parts and parts[-1] == name.lower():
                name = " / ".join(parts)
            name = " ".join(_capitalize(word) for word in name.split(" "))
            views.append(View(name=name, path=path))
        return views
