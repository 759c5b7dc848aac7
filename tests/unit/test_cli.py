"""Tests for the command line interface."""

import json
from datetime import UTC, datetime, timedelta

import pytest
import yaml

from applywise.tracker.models import ApplicationStatus, Priority


@pytest.fixture(autouse=True)
def _isolated_cwd(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SNAPSHOT_PATH", raising=False)


@pytest.fixture
def snapshot(tmp_path, make_application):
    """A YAML snapshot with three applications."""
    now = datetime.now(UTC)
    apps = [
        make_application(
            "Apple",
            "iOS Developer",
            location="Cupertino, CA",
            status=ApplicationStatus.INTERVIEWING,
            priority=Priority.HIGH,
            contact_email="jobs@apple.com",
            follow_up_date=now + timedelta(days=1),
        ),
        make_application("Google", "Mobile Developer", status=ApplicationStatus.OFFER),
        make_application("Meta", "Backend Engineer", status=ApplicationStatus.REJECTED),
    ]
    path = tmp_path / "applications.yaml"
    path.write_text(yaml.safe_dump([a.to_dict() for a in apps]))
    return path


def test_cli_parser_subcommands():
    from applywise.__main__ import create_parser
    from applywise.tracker.query import SortOrder

    parser = create_parser()

    args = parser.parse_args(
        ["list", "--status", "offer", "--priority", "High", "--sort", "Company A-Z"]
    )
    assert args.command == "list"
    assert args.status == ApplicationStatus.OFFER
    assert args.priority == Priority.HIGH
    assert args.sort == SortOrder.COMPANY_AZ

    assert parser.parse_args(["stats", "--json"]).json is True


def test_cli_rejects_unknown_status():
    from applywise.__main__ import create_parser

    with pytest.raises(SystemExit):
        create_parser().parse_args(["list", "--status", "Ghosted"])


def test_cli_without_command_prints_help(capsys):
    from applywise.__main__ import main

    assert main([]) == 0
    assert "usage: applywise" in capsys.readouterr().out


def test_cli_stats(snapshot, capsys):
    from applywise.__main__ import main

    assert main(["stats", "--file", str(snapshot)]) == 0

    out = capsys.readouterr().out
    assert "Total Applications: 3" in out
    assert "Interviews: 1" in out
    assert "Offers: 1" in out
    assert "Rejections: 1" in out
    assert "Follow-ups Due: 1" in out


def test_cli_stats_json(snapshot, capsys):
    from applywise.__main__ import main

    assert main(["stats", "--json", "--file", str(snapshot)]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["total"] == 3
    assert data["offers"] == 1


def test_cli_stats_uses_snapshot_path_setting(snapshot, monkeypatch, capsys):
    from applywise.__main__ import main

    monkeypatch.setenv("SNAPSHOT_PATH", str(snapshot))

    assert main(["stats"]) == 0
    assert "Total Applications: 3" in capsys.readouterr().out


def test_cli_list_grouped_by_status(snapshot, capsys):
    from applywise.__main__ import main

    assert main(["list", "--sort", "Status", "--file", str(snapshot)]) == 0

    out = capsys.readouterr().out
    assert "Interviewing (1)" in out
    assert "- [Interviewing] iOS Developer at Apple (High) - Cupertino, CA" in out
    assert out.index("Interviewing (1)") < out.index("Offer (1)")
    assert out.index("Offer (1)") < out.index("Rejected (1)")


def test_cli_list_search_without_results(snapshot, capsys):
    from applywise.__main__ import main

    assert main(["list", "--search", "netflix", "--file", str(snapshot)]) == 0
    assert 'No results for "netflix"' in capsys.readouterr().out


def test_cli_list_filters_without_results(snapshot, capsys):
    from applywise.__main__ import main

    assert main(["list", "--status", "Withdrawn", "--file", str(snapshot)]) == 0
    assert "No applications match your filters" in capsys.readouterr().out


def test_cli_followups(snapshot, capsys):
    from applywise.__main__ import main

    assert main(["followups", "--file", str(snapshot)]) == 0

    out = capsys.readouterr().out
    assert "iOS Developer at Apple <jobs@apple.com>" in out


def test_cli_insights(snapshot, capsys):
    from applywise.__main__ import main

    assert main(["insights", "--file", str(snapshot)]) == 0

    out = capsys.readouterr().out
    assert "- You're just getting started!" in out
    assert "You have 1 follow-ups due soon" in out


def test_cli_validate_reports_failures(tmp_path, make_application, capsys):
    from applywise.__main__ import main

    good = make_application("Apple", "iOS Developer")
    bad = make_application("Google", "Engineer", contact_email="nope")
    path = tmp_path / "applications.json"
    path.write_text(json.dumps([good.to_dict(), bad.to_dict()]))

    assert main(["validate", "--file", str(path)]) == 1

    out = capsys.readouterr().out
    assert f"- {bad.id}: Please enter a valid email address" in out
    assert "1/2 application(s) valid" in out


def test_cli_validate_all_valid(snapshot, capsys):
    from applywise.__main__ import main

    assert main(["validate", "--file", str(snapshot)]) == 0
    assert "3/3 application(s) valid" in capsys.readouterr().out


def test_cli_missing_snapshot(tmp_path, capsys):
    from applywise.__main__ import main

    assert main(["stats", "--file", str(tmp_path / "missing.yaml")]) == 1
    assert "Error: Snapshot not found" in capsys.readouterr().err


def test_cli_invalid_snapshot_entry(tmp_path, capsys):
    from applywise.__main__ import main

    path = tmp_path / "applications.yaml"
    path.write_text(
        "- id: abc\n  companyName: A\n  jobTitle: B\n  createdDate: someday\n"
    )

    assert main(["stats", "--file", str(path)]) == 1
    assert "Please enter a valid date" in capsys.readouterr().err
