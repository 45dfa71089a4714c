import json

import pytest

from conftest import FakeCollaborator
from zsh_installer import main as main_mod
from zsh_installer.errors import PreconditionError

EXPECTED_ZSHRC = """\
export ZSH="$HOME/.oh-my-zsh"
ZSH_THEME="powerlevel10k/powerlevel10k"
plugins=(git podman ssh-agent toolbox fzf zsh-interactive-cd ohmyzsh-full-autoupdate zsh-autosuggestions zsh-syntax-highlighting you-should-use)
export ZSH_CUSTOM_FULL_AUTOUPDATE_INHIBIT_OMZ_UPDATE=true
source $ZSH/oh-my-zsh.sh
[[ ! -f ~/.p10k.zsh ]] || source ~/.p10k.zsh
"""


def _run(env, tmp_path, fake, **kwargs):
    (tmp_path / "fonts").mkdir(exist_ok=True)
    config = tmp_path / "config.yaml"
    config.write_text(f"font:\n  dir: {tmp_path / 'fonts' / 'JetBrainsMono'}\n", encoding="utf-8")
    return main_mod.run(
        env=env,
        config_path=str(config),
        state_path=str(tmp_path / "state.json"),
        log_path=str(tmp_path / "install.log"),
        collaborator=fake,
        **kwargs,
    )


def test_full_run_configures_zshrc(env, tmp_path) -> None:
    (env.cwd / "p10k.zsh").write_text("# p10k\n", encoding="utf-8")
    fake = FakeCollaborator()

    state = _run(env, tmp_path, fake)

    assert (env.home / ".zshrc").read_text(encoding="utf-8") == EXPECTED_ZSHRC
    assert (env.home / ".p10k.zsh").exists()
    assert state["execution"]["summary"]["ran_steps"] == [s.step_id for s in main_mod.build_steps()]
    saved = json.loads((tmp_path / "state.json").read_text(encoding="utf-8"))
    assert saved["execution"]["completed_steps"][-1] == "90_summary"


def test_second_run_converges(env, tmp_path) -> None:
    _run(env, tmp_path, FakeCollaborator())
    first = (env.home / ".zshrc").read_text(encoding="utf-8")

    fake = FakeCollaborator()
    _run(env, tmp_path, fake)

    assert (env.home / ".zshrc").read_text(encoding="utf-8") == first
    assert "run_remote_script" not in fake.names()
    assert "download" not in fake.names()


def test_failure_is_recorded_in_state(env, tmp_path) -> None:
    with pytest.raises(PreconditionError):
        _run(env, tmp_path, FakeCollaborator(zshrc_template=None))

    saved = json.loads((tmp_path / "state.json").read_text(encoding="utf-8"))
    assert saved["execution"]["errors"][-1]["step"] == "30_install_oh_my_zsh"
    assert "40_install_theme" not in saved["execution"]["completed_steps"]


def test_dry_run_leaves_home_untouched(env, tmp_path) -> None:
    fake = FakeCollaborator()
    _run(env, tmp_path, fake, dry_run=True, stop_after="20_install_font")
    assert not (tmp_path / "state.json").exists()


def test_main_returns_zero_on_success(monkeypatch) -> None:
    captured: dict = {}
    monkeypatch.setattr(main_mod, "run", lambda **kwargs: captured.update(kwargs) or {})

    rc = main_mod.main(["--resume", "--start-at", "40_install_theme"])

    assert rc == 0
    assert captured["resume"] is True
    assert captured["start_at"] == "40_install_theme"
    assert captured["dry_run"] is False


def test_main_returns_one_on_installer_error(monkeypatch) -> None:
    def boom(**_kwargs):
        raise PreconditionError("no .zshrc")

    monkeypatch.setattr(main_mod, "run", boom)
    assert main_mod.main([]) == 1


def test_start_at_without_zshrc_aborts(env, tmp_path) -> None:
    with pytest.raises(PreconditionError):
        _run(env, tmp_path, FakeCollaborator(), start_at="40_install_theme")

    saved = json.loads((tmp_path / "state.json").read_text(encoding="utf-8"))
    assert saved["execution"]["errors"][-1]["step"] == "40_install_theme"
    assert saved["execution"]["completed_steps"] == []
    assert not (env.home / ".zshrc").exists()


def test_resume_retries_font_after_failed_download(env, tmp_path) -> None:
    (env.cwd / "p10k.zsh").write_text("# p10k\n", encoding="utf-8")
    state = _run(env, tmp_path, FakeCollaborator(fail=["download"]))
    assert "20_install_font" not in state["execution"]["completed_steps"]

    fake = FakeCollaborator()
    state = _run(env, tmp_path, fake, resume=True)

    assert "download" in fake.names()
    assert "run_remote_script" not in fake.names()
    assert "20_install_font" in state["execution"]["completed_steps"]


def test_main_returns_one_on_broken_config(env, tmp_path, monkeypatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("theme: foo\n", encoding="utf-8")
    monkeypatch.setattr(main_mod.Environment, "from_os", classmethod(lambda cls, environ=None: env))

    rc = main_mod.main(["--config", str(config), "--log", str(tmp_path / "install.log")])

    assert rc == 1
