from PIL import Image

from heartqr.cli import create_parser, main


def test_render_writes_png(tmp_path, capsys):
    out = tmp_path / "heart.png"
    assert main(["render", "example.com", "-o", str(out), "--size", "400", "--pattern", "dots"]) == 0
    with Image.open(out) as img:
        assert img.format == "PNG"
        assert img.size == (416, 416)
    assert "modules=29" in capsys.readouterr().out


def test_render_default_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["render", "https://example.com/hello", "--size", "256"]) == 0
    assert (tmp_path / "heart-qr_example.com-hello.png").exists()


def test_render_rejects_bad_input(tmp_path, capsys):
    assert main(["render", "   ", "-o", str(tmp_path / "x.png")]) == 1
    assert "ERROR" in capsys.readouterr().err
    assert not (tmp_path / "x.png").exists()


def test_strict_budget_within_budget_renders(tmp_path):
    out = tmp_path / "ok.png"
    assert main(["render", "example.com", "-o", str(out), "--mode", "mask", "--strict-budget"]) == 0
    assert out.exists()


def test_strict_budget_failure_writes_nothing(tmp_path, capsys):
    out = tmp_path / "x.png"
    code = main(["render", "example.com", "-o", str(out), "--mode", "mask",
                 "--strict-budget", "--max-budget-use", "0.05"])
    assert code == 1
    assert not out.exists()
    assert "correction budget" in capsys.readouterr().err


def test_budget_command(capsys):
    code = main(["budget", "example.com", "--mode", "dual"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Error budget (V3-H)" in out
    assert "SAFE" in out


def test_no_command_prints_help():
    assert main([]) == 1


def test_parser_defaults():
    args = create_parser().parse_args(["render", "example.com"])
    assert args.size == 512
    assert args.pattern == "none"
    assert args.module_style == "filled-square"
    assert args.mode == "dual"
    assert not args.protect_timing


def test_budget_command_over_budget(capsys):
    assert main(["budget", "example.com", "--max-budget-use", "0.05"]) == 1
    assert "OVER BUDGET" in capsys.readouterr().out


def test_budget_rejects_enlarging_size_factor(capsys):
    assert main(["budget", "example.com", "--size-factor", "5"]) == 1
    assert "heart_size_factor" in capsys.readouterr().err


def test_verify_rejects_non_image(tmp_path, capsys):
    bogus = tmp_path / "notes.png"
    bogus.write_text("not an image", encoding="utf-8")
    assert main(["verify", str(bogus)]) == 1
    assert "ERROR" in capsys.readouterr().err


def test_verify_missing_file(tmp_path):
    assert main(["verify", str(tmp_path / "missing.png")]) == 1
