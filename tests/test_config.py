from pathlib import Path

from bmsim.config import Config, SimulationConfig


def test_default_config():
    cfg = Config.default()

    assert cfg.simulation == SimulationConfig(minutes=0, report_every=15, fire_drill=None)
    assert cfg.encoding == "utf-8"
    assert cfg.debug_output_dir is None


def test_config_from_yaml(tmp_path):
    path = tmp_path / "bmsim.yaml"
    path.write_text(
        "simulation:\n"
        "  minutes: 90\n"
        "  fire_drill: LABORATORY\n"
        "encoding: latin-1\n"
        f"debug_output_dir: {tmp_path / 'debug'}\n",
        encoding="utf-8",
    )

    cfg = Config.from_yaml(path)

    assert cfg.simulation.minutes == 90
    assert cfg.simulation.report_every == 15
    assert cfg.simulation.fire_drill == "LABORATORY"
    assert cfg.encoding == "latin-1"
    assert cfg.debug_output_dir == Path(tmp_path / "debug")


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert Config.from_yaml(path) == Config.default()
