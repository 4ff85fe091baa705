"""Main test module for lyra-insights."""

import lyra_insights


class TestVersion:
    """Test version information."""

    def test_version_format(self) -> None:
        """Verifies version follows semantic versioning format.

        Business context:
        Semantic versioning communicates compatibility. MAJOR for
        breaking changes, MINOR for features, PATCH for fixes.
        """
        parts = lyra_insights.__version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)

    def test_metadata(self) -> None:
        """Verifies package metadata is exported."""
        assert lyra_insights.__title__ == "lyra_insights"
        assert lyra_insights.__license__ == "MIT"
        assert lyra_insights.__author__


class TestPublicAPI:
    """Test top-level exports."""

    def test_core_operations_exported(self) -> None:
        """Verifies the five engine operations are importable from the package."""
        for name in ("normalize", "align", "correlate", "map_to_geometry", "animate_to"):
            assert name in lyra_insights.__all__
            assert callable(getattr(lyra_insights, name))

    def test_end_to_end(self) -> None:
        """Verifies the quick start pipeline from the package docstring."""
        mood = lyra_insights.normalize([("2026-03-01T09:00:00Z", 9), ("2026-03-02T09:00:00Z", 2)])
        weather = lyra_insights.normalize(
            [("2026-03-01T12:00:00Z", 30), ("2026-03-02T12:00:00Z", 5)]
        )
        result = lyra_insights.correlate(lyra_insights.align(mood, weather))
        assert result.label == "positive"


class TestMainModule:
    """Test python -m entry point."""

    def test_main_module_has_main(self) -> None:
        """Verifies __main__ wires the CLI entry point."""
        from lyra_insights import __main__

        assert __main__.main is lyra_insights.cli.main
