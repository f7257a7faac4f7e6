import yaml

from kube_ir import cli


def _write_plan(tmp_path):
    plan_path = tmp_path / "plan.yaml"
    plan_path.write_text(
        "\n".join(
            [
                "apiVersion: kube-ir/v1alpha1",
                "kind: Plan",
                "metadata:",
                "  name: shop",
                "spec:",
                "  inputs:",
                "    services:",
                "      api:",
                "        - serviceName: api",
                "          image: shop/api:1",
                "          replicas: 2",
                "      web:",
                "        - serviceName: web",
                "          containers: [web, proxy]",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return plan_path


def _write_config(tmp_path, *lines: str):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("\n".join([*lines, ""]), encoding="utf-8")
    return config_path


def test_cli_list_passes_smoke(capsys):
    rc = cli.main(["list-passes"])
    assert rc == 0

    out = capsys.readouterr().out
    assert "optimize.image_pull_policy" in out


def test_cli_optimize_plan_to_stdout(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("KUBE_IR_CONFIG", raising=False)
    plan_path = _write_plan(tmp_path)
    config_path = _write_config(tmp_path, "logging:", "  level: WARNING")

    rc = cli.main(["optimize", "--plan", str(plan_path), "--config", str(config_path)])
    assert rc == 0

    doc = yaml.safe_load(capsys.readouterr().out)
    assert doc["name"] == "shop"
    assert doc["services"]["api"]["replicas"] == 2
    assert doc["services"]["api"]["containers"] == [
        {"name": "api", "image": "shop/api:1", "imagePullPolicy": "Always"}
    ]
    assert [c["name"] for c in doc["services"]["web"]["containers"]] == ["web", "proxy"]
    assert {c["imagePullPolicy"] for c in doc["services"]["web"]["containers"]} == {"Always"}


def test_cli_optimize_ir_file_preserves_set_policies(tmp_path, monkeypatch):
    ir_path = tmp_path / "ir.yaml"
    ir_path.write_text(
        "\n".join(
            [
                "name: shop",
                "services:",
                "  api:",
                "    replicas: 4",
                "    containers:",
                "      - name: api",
                "        imagePullPolicy: IfNotPresent",
                "      - name: sidecar",
                "",
            ]
        ),
        encoding="utf-8",
    )
    out_path = tmp_path / "out"
    out_path.mkdir()
    out_file = out_path / "ir.yaml"
    log_dir = tmp_path / "logs"
    config_path = _write_config(
        tmp_path, "logging:", "  level: ERROR", f"  log_dir: '{log_dir.as_posix()}'"
    )
    monkeypatch.setenv("KUBE_IR_CONFIG", str(config_path))

    rc = cli.main(["optimize", "--ir", str(ir_path), "--out", str(out_file)])
    assert rc == 0

    doc = yaml.safe_load(out_file.read_text(encoding="utf-8"))
    assert [c.get("imagePullPolicy") for c in doc["services"]["api"]["containers"]] == [
        "IfNotPresent",
        "Always",
    ]
    logs = list(log_dir.glob("*_oplog.log"))
    assert len(logs) == 1
    assert "Completed pass optimize.image_pull_policy" in logs[0].read_text(encoding="utf-8")


def test_cli_optimize_with_empty_pass_list_leaves_policy_unset(tmp_path, capsys):
    plan_path = _write_plan(tmp_path)
    config_path = _write_config(tmp_path, "optimize:", "  passes: []", "logging:", "  level: ERROR")

    rc = cli.main(["optimize", "--plan", str(plan_path), "--config", str(config_path)])
    assert rc == 0

    doc = yaml.safe_load(capsys.readouterr().out)
    assert "imagePullPolicy" not in doc["services"]["api"]["containers"][0]


def test_cli_optimize_rejects_invalid_config(tmp_path, capsys):
    plan_path = _write_plan(tmp_path)
    config_path = _write_config(tmp_path, "optimize:", "  on_error: retry")

    rc = cli.main(["optimize", "--plan", str(plan_path), "--config", str(config_path)])
    assert rc == 2

    assert "invalid configuration" in capsys.readouterr().err


def test_cli_optimize_unknown_pass_returns_error(tmp_path, capsys):
    plan_path = _write_plan(tmp_path)
    config_path = _write_config(tmp_path, "logging:", "  level: ERROR")

    rc = cli.main(
        [
            "optimize",
            "--plan",
            str(plan_path),
            "--config",
            str(config_path),
            "--pass",
            "image_pull_polcy",
        ]
    )
    assert rc == 2

    err = capsys.readouterr().err
    assert "did you mean: optimize.image_pull_policy" in err


def test_cli_optimize_missing_plan_returns_error(tmp_path, capsys):
    config_path = _write_config(tmp_path, "logging:", "  level: ERROR")

    rc = cli.main(
        ["optimize", "--plan", str(tmp_path / "missing.yaml"), "--config", str(config_path)]
    )
    assert rc == 2
    assert "Unable to load input" in capsys.readouterr().err


def test_cli_optimize_rejects_null_log_level(tmp_path, capsys):
    plan_path = _write_plan(tmp_path)
    config_path = _write_config(tmp_path, "logging:", "  level: null")

    rc = cli.main(["optimize", "--plan", str(plan_path), "--config", str(config_path)])
    assert rc == 2

    err = capsys.readouterr().err
    assert "invalid configuration" in err
    assert "logging.level must be one of" in err


def test_cli_optimize_rejects_unknown_log_level(tmp_path, capsys):
    plan_path = _write_plan(tmp_path)
    config_path = _write_config(tmp_path, "logging:", "  level: chatty")

    rc = cli.main(["optimize", "--plan", str(plan_path), "--config", str(config_path)])
    assert rc == 2
    assert "got 'chatty'" in capsys.readouterr().err


def test_cli_optimize_rejects_null_on_error(tmp_path, capsys):
    plan_path = _write_plan(tmp_path)
    config_path = _write_config(tmp_path, "optimize:", "  on_error: null")

    rc = cli.main(["optimize", "--plan", str(plan_path), "--config", str(config_path)])
    assert rc == 2
    assert "optimize.on_error cannot be null" in capsys.readouterr().err


def test_cli_optimize_accepts_tag_selector(tmp_path, capsys):
    plan_path = _write_plan(tmp_path)
    config_path = _write_config(tmp_path, "optimize:", "  passes: []", "logging:", "  level: ERROR")

    rc = cli.main(
        [
            "optimize",
            "--plan",
            str(plan_path),
            "--config",
            str(config_path),
            "--pass",
            "tag:containers",
        ]
    )
    assert rc == 0

    doc = yaml.safe_load(capsys.readouterr().out)
    assert doc["services"]["api"]["containers"][0]["imagePullPolicy"] == "Always"


def test_cli_optimize_warns_when_pass_list_is_empty(tmp_path, capsys):
    plan_path = _write_plan(tmp_path)
    config_path = _write_config(tmp_path, "optimize:", "  passes: []", "logging:", "  level: WARNING")

    rc = cli.main(["optimize", "--plan", str(plan_path), "--config", str(config_path)])
    assert rc == 0

    assert "optimize.passes is empty" in capsys.readouterr().err
