import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _is_e2e_test(request: pytest.FixtureRequest) -> bool:
    return "tests/e2e/" in str(request.node.fspath).replace("\\", "/")


@pytest.fixture(autouse=True)
def isolated_guild_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GUILD_DATABASE_URL",
        "GUILD_SAVE_PATH",
        "GUILD_RNG_SEED",
        "GUILD_IN_MEMORY",
        "GUILD_AUTOSAVE_MS",
        "GUILD_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def disable_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("time.sleep", lambda *_args, **_kwargs: None)


@pytest.fixture(autouse=True)
def e2e_local_storage(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    if not _is_e2e_test(request):
        return

    monkeypatch.setenv("GUILD_IN_MEMORY", "1")
    monkeypatch.setenv("GUILD_SAVE_PATH", str(tmp_path / "guild_master_save.json"))
