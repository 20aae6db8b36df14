from __future__ import annotations


def test_top_level_exports() -> None:
    import contentreg

    assert contentreg.run is not None
    assert contentreg.ContentRegistry is not None
    assert contentreg.RegistryClient is not None
    assert contentreg.RegistryServer is not None
    assert issubclass(contentreg.NotAdmin, contentreg.RegistryError)
    assert issubclass(contentreg.InvalidContent, contentreg.RegistryError)


def test_package_paths_work() -> None:
    from contentreg.api import create_api_app
    from contentreg.api.routes import mount_contents_api
    from contentreg.api.serializers import record_to_dict
    from contentreg.core.registry import ContentRegistry, registry_from_env
    from contentreg.core.validation import prefix_gate
    from contentreg.runtime.app import create_app
    from contentreg.runtime.server import RegistryServer, run
    from contentreg.sdk.client import RegistryClient

    assert create_api_app is not None
    assert mount_contents_api is not None
    assert record_to_dict is not None
    assert ContentRegistry is not None
    assert prefix_gate is not None
    assert create_app is not None
    assert RegistryServer is not None
    assert run is not None
    assert RegistryClient is not None


def test_registry_from_env(monkeypatch) -> None:
    from contentreg.core.registry import registry_from_env

    monkeypatch.setenv("CONTENTREG_ADMIN", "ops")
    monkeypatch.setenv("CONTENTREG_RULE", "ipfs:")
    monkeypatch.setenv("CONTENTREG_GATED", "0")

    reg = registry_from_env()
    assert reg.admin == "ops"
    assert reg.get_validation_rule() == "ipfs:"
    # Ungated: the rule is stored but not enforced.
    assert reg.register("x", "plain") == 1

    override = registry_from_env(admin="root", gated=True)
    assert override.admin == "root"
    assert override.get_validation_rule() == "ipfs:"
