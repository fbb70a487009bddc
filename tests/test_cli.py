from cli import build_parser, cli_quote


def test_quote_prints_expected_output(capsys):
    exit_code = cli_quote("100000", "1000", "100", "1", 30)

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Expected output: 0.996007" in out
    assert "Price impact:    0.1000%" in out


def test_quote_rejects_empty_pool(capsys):
    exit_code = cli_quote("0", "1000", "100", "1", 30)

    assert exit_code == 1
    assert "arithmetic" in capsys.readouterr().out


def test_parser_defaults():
    args = build_parser().parse_args(["quote", "10", "20", "1"])

    assert args.command == "quote"
    assert args.fee_bps == 30
    assert args.slippage == "1"
