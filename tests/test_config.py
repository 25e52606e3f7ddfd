from pathlib import Path

import pytest
from pydantic import ValidationError

from apricot_auth.config import import_callable, load_config, load_provider_config
from tests.auth.provider_adapter_testkit import map_member_without_admin


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yml"
    path.write_text(text)
    return path


def test_load_provider_config_resolves_env_vars(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("WA_CLIENT_ID", "cid-from-env")
    monkeypatch.setenv("WA_CLIENT_SECRET", "secret-from-env")
    path = _write(
        tmp_path,
        """
wildapricot:
  client_id: ${WA_CLIENT_ID}
  client_secret: ${WA_CLIENT_SECRET}
  site_name: myassociation
  account_id: 123456
  scopes: [contacts_me, auto]
""",
    )

    config = load_provider_config(path)
    assert config.client_id == "cid-from-env"
    assert config.client_secret == "secret-from-env"
    assert config.site_name == "myassociation"
    assert config.account_id == "123456"
    assert config.scopes == ["contacts_me", "auto"]
    assert config.map_profile_to_user is None


def test_load_config_missing_env_var(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WA_MISSING_SECRET", raising=False)
    path = _write(
        tmp_path,
        """
wildapricot:
  client_id: cid
  client_secret: ${WA_MISSING_SECRET}
  account_id: "1"
""",
    )
    with pytest.raises(ValueError, match="WA_MISSING_SECRET"):
        load_config(path)


def test_load_config_uses_env_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(
        tmp_path,
        """
wildapricot:
  client_id: cid
  client_secret: secret
  account_id: "1"
logging:
  level: DEBUG
""",
    )
    monkeypatch.setenv("APRICOT_AUTH_CONFIG", str(path))

    config = load_config()
    assert config.wildapricot.client_id == "cid"
    assert config.logging.level == "DEBUG"


def test_load_config_defaults_logging_level(tmp_path: Path) -> None:
    path = _write(
        tmp_path, "wildapricot:\n  client_id: cid\n  client_secret: s\n  account_id: '1'\n"
    )
    assert load_config(path).logging.level == "WARNING"


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yml")


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="mapping"):
        load_config(_write(tmp_path, "- just\n- a list\n"))


def test_load_config_requires_provider_section(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        load_config(_write(tmp_path, "logging:\n  level: INFO\n"))


def test_load_config_imports_profile_mapper(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
wildapricot:
  client_id: cid
  client_secret: secret
  account_id: "1"
  map_profile_to_user: tests.auth.provider_adapter_testkit:map_member_without_admin
""",
    )
    assert load_provider_config(path).map_profile_to_user is map_member_without_admin


@pytest.mark.parametrize("reference", ["no_colon", ":attr", "module:"])
def test_import_callable_rejects_malformed_reference(reference: str) -> None:
    with pytest.raises(ValueError):
        import_callable(reference)


def test_import_callable_rejects_non_callable() -> None:
    with pytest.raises(ValueError, match="callable"):
        import_callable("apricot_auth.config:CONFIG_ENV_VAR")
