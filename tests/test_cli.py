import csv

import yaml
from click.testing import CliRunner

from expense_tracker import cli as cli_module
from expense_tracker.cli import main as cli
from expense_tracker.database import connect, create_transaction, list_transactions


def write_manual(path):
    path.write_text(
        """\
- type: income
  category: salary
  amount: 1000
  date: 2024-10-22
  description: Monthly Salary
- type: expense
  category: rent
  amount: 300
  date: 2024-10-23
"""
    )


def test_cli_import_and_summary(tmp_path):
    manual = tmp_path / 'manual.yaml'
    write_manual(manual)
    db_path = tmp_path / 'txs.db'

    runner = CliRunner()
    res = runner.invoke(cli, ['import', str(manual), '--db', str(db_path)])
    assert res.exit_code == 0, res.output
    assert f"Imported 2 transaction(s) into {db_path}." in res.output

    conn = connect(str(db_path))
    rows = list_transactions(conn)
    conn.close()
    assert [(r.type, r.date) for r in rows] == [('income', '2024-10-22'), ('expense', '2024-10-23')]

    res = runner.invoke(cli, ['summary', '--db', str(db_path)])
    assert res.exit_code == 0, res.output
    assert 'Total income:  1000.00' in res.output
    assert 'Total expense: 300.00' in res.output
    assert 'Balance:       700.00' in res.output


def test_cli_import_rejects_incomplete_entry(tmp_path):
    manual = tmp_path / 'manual.yaml'
    manual.write_text("- type: income\n  date: 2024-10-22\n")

    res = CliRunner().invoke(cli, ['import', str(manual), '--db', str(tmp_path / 'txs.db')])
    assert res.exit_code == 1
    assert "Missing 'amount'" in res.output


def test_cli_export_csv(tmp_path):
    db_path = tmp_path / 'txs.db'
    conn = connect(str(db_path))
    create_transaction(conn, 'expense', 'rent', 300, '2024-10-23')
    create_transaction(conn, 'income', 'salary', 1000, '2024-10-22', 'Monthly Salary')
    conn.close()
    out_dir = tmp_path / 'data'

    res = CliRunner().invoke(
        cli, ['export', '--db', str(db_path), '--output-dir', str(out_dir)]
    )
    assert res.exit_code == 0, res.output

    with open(out_dir / 'transactions.csv', newline='') as f:
        rows = list(csv.reader(f))
    assert rows[0] == ['id', 'date', 'type', 'category', 'amount', 'description']
    assert rows[1] == ['2', '2024-10-22', 'income', 'salary', '1000.00', 'Monthly Salary']
    assert rows[2] == ['1', '2024-10-23', 'expense', 'rent', '300.00', '']


def test_cli_export_empty_db(tmp_path):
    res = CliRunner().invoke(
        cli,
        ['export', '--db', str(tmp_path / 'txs.db'), '--output-dir', str(tmp_path / 'data')],
    )
    assert res.exit_code == 0, res.output
    assert 'No transactions to export.' in res.output
    assert not (tmp_path / 'data').exists()


def test_cli_serve_uses_config(tmp_path, monkeypatch):
    calls = {}

    def fake_run(app, host, port, log_level):
        calls['app'] = app
        calls['host'] = host
        calls['port'] = port

    monkeypatch.setattr(cli_module.uvicorn, 'run', fake_run)
    cfg_path = tmp_path / 'config.yaml'
    with open(cfg_path, 'w') as f:
        yaml.safe_dump({'host': '127.0.0.1', 'db_path': str(tmp_path / 'cfg.db')}, f)

    res = CliRunner().invoke(cli, ['--config', str(cfg_path), 'serve'])
    assert res.exit_code == 0, res.output
    assert calls['host'] == '127.0.0.1'
    assert calls['port'] == 3000
    assert calls['app'].title == 'Expense Tracker API'

    res = CliRunner().invoke(cli, ['--config', str(cfg_path), 'serve', '--port', '8080'])
    assert res.exit_code == 0, res.output
    assert calls['port'] == 8080


def test_cli_serve_accepts_port_zero(tmp_path, monkeypatch):
    calls = {}
    monkeypatch.setattr(
        cli_module.uvicorn, 'run', lambda app, host, port, log_level: calls.update(port=port)
    )

    res = CliRunner().invoke(cli, ['serve', '--port', '0', '--db', str(tmp_path / 'txs.db')])
    assert res.exit_code == 0, res.output
    assert calls['port'] == 0
