from pathlib import Path

from homewatch import cli
from homewatch.core import JsonSubscriptionStore


def _write_config(tmp_path: Path, body: str = "") -> Path:
    config_path = tmp_path / "homewatch.cfg"
    config_path.write_text(
        f"[storage]\npath = {tmp_path / 'storage.json'}\n\n[logging]\npath =\n" + body,
        encoding="utf-8",
    )
    return config_path


def test_subscribers_lists_persisted_ids(tmp_path: Path, capsys) -> None:
    config_path = _write_config(tmp_path)
    JsonSubscriptionStore(tmp_path / "storage.json").save([42, -1001])

    assert cli.main(["-c", str(config_path), "subscribers"]) == 0

    assert capsys.readouterr().out.split() == ["42", "-1001"]


def test_show_config_masks_bot_token(tmp_path: Path, capsys) -> None:
    config_path = _write_config(tmp_path, "\n[telegram]\nbot_token = 123:secret\n")

    assert cli.main(["-c", str(config_path), "show-config"]) == 0

    output = capsys.readouterr().out
    assert "bot_token = ***" in output
    assert "123:secret" not in output
    assert "[actuators]" in output


def test_start_without_webhook_settings_fails(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path)

    assert cli.main(["-c", str(config_path), "start"]) == 1
