import json
import pytest

from checkpointer.cli.main import main
from conftest import CHAIN_NAME, STATE_HASH, CONTRACT


@pytest.fixture
def config_path(tmp_path, parity_dir):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "PARITY_DIR": str(parity_dir),
        "CHAIN_NAME": CHAIN_NAME,
        "CONTRACT": CONTRACT,
        "KEYSTORE_DIR": str(tmp_path / "keys"),
    }))
    return path


def test_manifest_command(config_path, capsys):
    main(["--config", str(config_path), "manifest"])

    out = json.loads(capsys.readouterr().out)
    assert out["block_number"] == 100
    assert out["state_hash"] == STATE_HASH
    assert out["path"].endswith("MANIFEST")


def test_manifest_command_without_location(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text("{}")

    with pytest.raises(SystemExit) as exc:
        main(["--config", str(path), "manifest"])
    assert exc.value.code == 1


def test_missing_config_file_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(tmp_path / "missing.json"), "once"])
    assert exc.value.code == 2


def test_once_without_signer_key_exits(config_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(config_path), "once"])
    assert exc.value.code == 2
    assert "not found" in capsys.readouterr().out


def test_keys_add_and_list(config_path, capsys):
    main(["--config", str(config_path), "keys", "add", "checkpoint"])
    main(["--config", str(config_path), "keys", "list"])

    out = capsys.readouterr().out
    assert "Key 'checkpoint' created." in out
    assert "checkpoint" in out.splitlines()[-1]
