"""Installability sanity tests for contextcore.

The core package must import and run with only the stdlib available.
"""


def test_no_external_imports():
    """Core contextcore must not import anything outside stdlib."""
    import contextcore.analyzer
    import contextcore.compiler
    import contextcore.pipeline
    import contextcore.types
    import contextcore.utils
    # If we got here without ImportError, stdlib-only is confirmed


def test_version_exists():
    import contextcore
    assert contextcore.__version__ == "0.1.0"


def test_core_exports():
    """All documented public exports must be importable."""
    import contextcore

    for name in contextcore.__all__:
        assert hasattr(contextcore, name), name
    assert callable(contextcore.extract_context)


def test_bundled_data_loads():
    from contextcore.analyzer import analyze
    from contextcore.cues import get_taxonomy

    assert get_taxonomy() is not None
    assert analyze("I like tea").tokens


def test_readme_example_works():
    from contextcore import extract_context

    response = extract_context("I prefer dark mode over light mode")
    assert response.preferences[0].value == "dark mode"
    assert response.to_dict()["meta"]["source"] == "text"
