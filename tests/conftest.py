"""Shared pytest fixtures for tokken tests."""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from tokken.config import TOKEN_ENV_VAR, ExtractionConfig
from tokken.figma.client import FigmaClient
from tokken.figma.retry import RetryPolicy

FILE_KEY = "AbC123xyz"
CDN = "https://cdn.figma.test"


def figma_rgb(hex_color: str, alpha: float = 1.0) -> dict[str, float]:
    """``#rrggbb`` as a design-tool colour (0-1 channels)."""
    body = hex_color.lstrip("#")
    r, g, b = (int(body[i : i + 2], 16) / 255 for i in (0, 2, 4))
    return {"r": r, "g": g, "b": b, "a": alpha}


def solid(hex_color: str, **extra: Any) -> dict[str, Any]:
    return {"type": "SOLID", "color": figma_rgb(hex_color), **extra}


def text_node(node_id: str, text: str, size: float = 14, weight: float = 500) -> dict[str, Any]:
    return {
        "id": node_id,
        "name": text,
        "type": "TEXT",
        "fills": [solid("#ffffff")],
        "style": {
            "fontFamily": "Roboto",
            "fontSize": size,
            "fontWeight": weight,
            "lineHeightPx": 20,
            "letterSpacing": 0.1,
        },
    }


def button_variant(node_id: str, state: str, fill: str) -> dict[str, Any]:
    return {
        "id": node_id,
        "name": f"State={state}",
        "type": "COMPONENT",
        "fills": [solid(fill)],
        "layoutMode": "HORIZONTAL",
        "paddingTop": 10,
        "paddingRight": 24,
        "paddingBottom": 10,
        "paddingLeft": 24,
        "itemSpacing": 8,
        "primaryAxisAlignItems": "CENTER",
        "counterAxisAlignItems": "CENTER",
        "cornerRadius": 100,
        "children": [text_node(f"{node_id}-label", "Label")],
    }


def build_file_graph() -> dict[str, Any]:
    """
    A small design file:

    - Page "Actions": a Button variant set with three variants, plus the
      rectangle defining the published "Primary" colour style.
    - Page "Display": standalone "Card" and "Avatar" components.
    - One published colour style (in the tree) and one published text style
      whose defining node is *not* in the tree.
    - No effects, no icons.
    """
    document = {
        "id": "0:0",
        "name": "Document",
        "type": "DOCUMENT",
        "children": [
            {
                "id": "1:0",
                "name": "Actions",
                "type": "CANVAS",
                "children": [
                    {
                        "id": "10:0",
                        "name": "Button",
                        "type": "COMPONENT_SET",
                        # Editor chrome on the set container; must not leak into styles.
                        "cornerRadius": 5,
                        "strokes": [solid("#9747ff")],
                        "strokeWeight": 1,
                        "layoutMode": "VERTICAL",
                        "paddingTop": 20,
                        "paddingRight": 20,
                        "paddingBottom": 20,
                        "paddingLeft": 20,
                        "componentPropertyDefinitions": {
                            "State": {
                                "type": "VARIANT",
                                "defaultValue": "Default",
                                "variantOptions": ["Default", "Hover", "Disabled"],
                            }
                        },
                        "children": [
                            button_variant("10:1", "Default", "#6750a4"),
                            button_variant("10:2", "Hover", "#7965af"),
                            button_variant("10:3", "Disabled", "#e8def8"),
                        ],
                    },
                    {
                        "id": "3:1",
                        "name": "Primary swatch",
                        "type": "RECTANGLE",
                        "fills": [solid("#6750a4", opacity=0.9)],
                        "styles": {"fill": "3:1"},
                    },
                ],
            },
            {
                "id": "4:0",
                "name": "Display",
                "type": "CANVAS",
                "children": [
                    {
                        "id": "4:1",
                        "name": "Card",
                        "type": "COMPONENT",
                        "fills": [solid("#fffbfe")],
                        "rectangleCornerRadii": [12, 12, 0, 0],
                        "children": [text_node("4:1-title", "Title", size=22, weight=400)],
                    },
                    {
                        "id": "4:2",
                        "name": "Avatar",
                        "type": "COMPONENT",
                        "fills": [solid("#1d1b20")],
                        "cornerRadius": 20,
                    },
                ],
            },
        ],
    }
    return {
        "name": "Demo Design System",
        "document": document,
        "styles": {
            "3:1": {"key": "k1", "name": "Primary", "styleType": "FILL", "description": ""},
            "3:2": {"key": "k2", "name": "Body/Medium", "styleType": "TEXT", "description": ""},
        },
        "components": {
            "10:1": {"key": "c1", "name": "State=Default", "componentSetId": "10:0"},
            "10:2": {"key": "c2", "name": "State=Hover", "componentSetId": "10:0"},
            "10:3": {"key": "c3", "name": "State=Disabled", "componentSetId": "10:0"},
            "4:1": {"key": "c4", "name": "Card", "description": "Content container"},
            "4:2": {"key": "c5", "name": "Avatar", "description": ""},
        },
        "componentSets": {
            "10:0": {"key": "s1", "name": "Button", "description": "Primary action"},
        },
    }


BODY_TEXT_STYLE_NODE = {
    "id": "3:2",
    "name": "Body/Medium",
    "type": "TEXT",
    "style": {
        "fontFamily": "Roboto",
        "fontSize": 14,
        "fontWeight": 500,
        "lineHeightPx": 20,
        "letterSpacing": 0.1,
    },
}


class FakeFigma:
    """
    In-memory Figma API behind ``httpx.MockTransport``.

    Serves the file graph, by-id nodes, variables and image exports, and
    records every request. ``status_overrides`` maps a path to a list of
    status codes returned (in order) before the real response.
    ``non_json_responses`` maps a path to how many HTML bodies it answers
    with status 200 first.
    """

    def __init__(self, file_graph: dict[str, Any]):
        self.file_graph = file_graph
        self.extra_nodes: dict[str, dict[str, Any]] = {"3:2": BODY_TEXT_STYLE_NODE}
        self.variables: dict[str, Any] | None = None
        self.variables_status = 403
        self.missing_image_ids: set[str] = set()
        self.failing_downloads: set[str] = set()
        self.status_overrides: dict[str, list[int]] = {}
        self.non_json_responses: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def requests_to(self, path_suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(path_suffix)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        queued = self.status_overrides.get(path)
        if queued:
            return httpx.Response(queued.pop(0), json={"status": "error"})
        if self.non_json_responses.get(path):
            self.non_json_responses[path] -= 1
            return httpx.Response(200, text="<html>gateway</html>")

        if request.url.host == "cdn.figma.test":
            node_id = path.rsplit("/", 1)[-1].rsplit(".", 1)[0]
            if node_id in self.failing_downloads:
                return httpx.Response(500)
            return httpx.Response(200, content=f"image:{node_id}".encode())

        if path == f"/v1/files/{FILE_KEY}":
            return httpx.Response(200, json=self.file_graph)
        if path == f"/v1/files/{FILE_KEY}/nodes":
            ids = request.url.params["ids"].split(",")
            nodes = {i: {"document": self.extra_nodes[i]} for i in ids if i in self.extra_nodes}
            return httpx.Response(200, json={"nodes": nodes})
        if path == f"/v1/files/{FILE_KEY}/variables/local":
            if self.variables is None:
                return httpx.Response(self.variables_status, json={"status": self.variables_status})
            return httpx.Response(200, json=self.variables)
        if path == f"/v1/images/{FILE_KEY}":
            fmt = request.url.params.get("format", "png")
            ids = request.url.params["ids"].split(",")
            images = {
                i: None if i in self.missing_image_ids else f"{CDN}/{i}.{fmt}" for i in ids
            }
            return httpx.Response(200, json={"err": None, "images": images})
        return httpx.Response(404, json={"status": 404})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(autouse=True)
def _isolated_token_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """No real token leaks in; anything a test loads is undone afterwards."""
    monkeypatch.setenv(TOKEN_ENV_VAR, "")
    monkeypatch.delenv(TOKEN_ENV_VAR)


async def _no_sleep(_: float) -> None:
    return None


@pytest.fixture
def file_graph() -> dict[str, Any]:
    """Fresh copy of the synthetic design file."""
    return copy.deepcopy(build_file_graph())


@pytest.fixture
def fake_figma(file_graph: dict[str, Any]) -> FakeFigma:
    return FakeFigma(file_graph)


@pytest.fixture
def make_client(fake_figma: FakeFigma) -> Callable[..., FigmaClient]:
    """Factory for clients wired to ``fake_figma`` with instant retries."""

    def _make(**kwargs: Any) -> FigmaClient:
        kwargs.setdefault("retry_policy", RetryPolicy(base_delay=0.01, sleep=_no_sleep))
        return FigmaClient("figd_test", FILE_KEY, transport=fake_figma.transport(), **kwargs)

    return _make


@pytest.fixture
def extraction_config(tmp_path: Path) -> ExtractionConfig:
    return ExtractionConfig(
        access_token="figd_test",
        file_key=FILE_KEY,
        output_dir=tmp_path / "out",
        figma_url=f"https://www.figma.com/design/{FILE_KEY}/Demo",
    )


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path

    return _write
