"""Registry module that describes one route twice."""

from __future__ import annotations

from fluent_swagger import MetadataRegistry

registry = MetadataRegistry()

registry.describe("get", "/status").with_summary("Service status")
registry.describe("GET", "/status").with_summary("Service status again")
