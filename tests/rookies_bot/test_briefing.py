"""Tests for briefing doc and penalty tracker generation."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from googleapiclient.errors import HttpError

from rookies_bot.briefing import (
    BriefingGenerator,
    build_briefing_requests,
    find_anchor_index,
    heading_requests,
    penalty_entry_requests,
    utf16_len,
)
from rookies_bot.config import Config, Round
from rookies_bot.exceptions import BriefingError
from rookies_bot.models.penalties import Penalties
from tests.conftest import BOT_CONFIG, LANDO, MAX, OSCAR, ROUND_CONFIG

ANCHOR_INDEX = 120


def _paragraph(start: int, text: str, style: str) -> dict:
    return {
        "startIndex": start,
        "endIndex": start + len(text),
        "paragraph": {
            "paragraphStyle": {"namedStyleType": style},
            "elements": [{"startIndex": start, "textRun": {"content": text}}],
        },
    }


SAMPLE_DOCUMENT = {
    "documentId": "doc-123",
    "body": {
        "content": [
            {"endIndex": 1, "sectionBreak": {}},
            _paragraph(1, "Rookies [SEASON] Round [num] at [Track Name]\n", "TITLE"),
            _paragraph(50, "Streaming notes\n", "HEADING_4"),
            _paragraph(70, "Stream schedule\n", "HEADING_3"),
            _paragraph(90, "Qualifying groups\n", "HEADING_3"),
            _paragraph(ANCHOR_INDEX, "Stream\n", "HEADING_3"),
            {"startIndex": 127, "endIndex": 140, "table": {}},
        ]
    },
}


def _inserted_texts(requests: list[dict]) -> list[str]:
    return [r["insertText"]["text"] for r in requests if "insertText" in r]


def _http_error(status: int = 404) -> HttpError:
    resp = MagicMock()
    resp.status = status
    resp.reason = "Not Found"
    return HttpError(resp, b"missing")


@pytest.fixture
def penalties() -> Penalties:
    return Penalties(
        quali_bans_r1=[LANDO],
        pit_starts_r1=[OSCAR],
        pit_starts_r1_carried_over=[MAX],
    )


class TestFindAnchorIndex:
    def test_last_stream_h3(self) -> None:
        assert find_anchor_index(SAMPLE_DOCUMENT) == ANCHOR_INDEX

    def test_missing_anchor(self) -> None:
        document = {"body": {"content": [_paragraph(1, "Stream\n", "HEADING_4")]}}
        with pytest.raises(BriefingError, match="could not find H3 'Stream'"):
            find_anchor_index(document)

    def test_empty_paragraph_skipped(self) -> None:
        empty = {
            "startIndex": 5,
            "paragraph": {"paragraphStyle": {"namedStyleType": "HEADING_3"}, "elements": []},
        }
        document = {"body": {"content": [_paragraph(1, "Stream\n", "HEADING_3"), empty]}}
        assert find_anchor_index(document) == 1


class TestRequestBuilders:
    def test_utf16_len(self) -> None:
        assert utf16_len("abc") == 3
        assert utf16_len("é😀") == 3

    def test_heading_requests(self) -> None:
        requests = heading_requests(10, "HEADING_4", "Race 1 Pit Starts\n")
        assert requests[0] == {"insertText": {"location": {"index": 10}, "text": "Race 1 Pit Starts\n"}}
        assert requests[1]["deleteParagraphBullets"]["range"] == {"startIndex": 10, "endIndex": 28}
        style = requests[2]["updateParagraphStyle"]
        assert style["paragraphStyle"] == {"namedStyleType": "HEADING_4"}
        assert style["fields"] == "*"

    def test_penalty_entry_requests(self) -> None:
        requests = penalty_entry_requests(10, "None!\n")
        bullets = requests[1]["createParagraphBullets"]
        assert bullets["range"] == {"startIndex": 10, "endIndex": 16}
        assert bullets["bulletPreset"] == "BULLET_DISC_CIRCLE_SQUARE"
        style = requests[2]["updateParagraphStyle"]["paragraphStyle"]
        assert style["namedStyleType"] == "NORMAL_TEXT"
        assert style["indentFirstLine"] == {"magnitude": 18, "unit": "PT"}
        assert style["indentStart"] == {"magnitude": 36, "unit": "PT"}


class TestBuildBriefingRequests:
    def test_section_reads_in_order(self, config, penalties) -> None:
        requests = build_briefing_requests(config, penalties, SAMPLE_DOCUMENT)
        # Each insert lands at the anchor, so the document reads them last-first.
        assert list(reversed(_inserted_texts(requests))) == [
            "Drivers Serving Penalties Tonight\n",
            "Race 1 Quali Bans\n",
            "#004 - Lando Norris\n",
            "Race 1 Pit Starts\n",
            "#001 - Max Verstappen (carried over)\n",
            "#081 - Oscar Piastri\n",
            "Race 2 Quali Bans\n",
            "None!\n",
            "Race 2 Pit Starts\n",
            "None!\n",
        ]

    def test_all_inserts_at_anchor(self, config, penalties) -> None:
        requests = build_briefing_requests(config, penalties, SAMPLE_DOCUMENT)
        indexes = {r["insertText"]["location"]["index"] for r in requests if "insertText" in r}
        assert indexes == {ANCHOR_INDEX}

    def test_heading_styles(self, config) -> None:
        requests = build_briefing_requests(config, Penalties(), SAMPLE_DOCUMENT)
        styles = [
            r["updateParagraphStyle"]["paragraphStyle"]["namedStyleType"]
            for r in requests
            if "updateParagraphStyle" in r
        ]
        assert styles[-1] == "HEADING_3"
        assert styles.count("HEADING_4") == 4
        assert styles.count("NORMAL_TEXT") == 4

    def test_placeholders_odd_round(self, penalties) -> None:
        round_config = {**ROUND_CONFIG, "next_round": {"number": 3, "track": "Suzuka"}}
        config = Config.model_validate({**BOT_CONFIG, **round_config})
        requests = build_briefing_requests(config, penalties, SAMPLE_DOCUMENT)
        replacements = {
            r["replaceAllText"]["containsText"]["text"]: r["replaceAllText"]["replaceText"]
            for r in requests
            if "replaceAllText" in r
        }
        assert replacements == {
            "[num]": "3",
            "[Track Name]": "Suzuka",
            "[group1]": "ODD",
            "[group2]": "EVEN",
            "[briefing time]": "7:30PM Eastern/4:30PM Pacific",
            "[SEASON]": "S12",
        }

    def test_placeholders_even_round(self, config, penalties) -> None:
        requests = build_briefing_requests(config, penalties, SAMPLE_DOCUMENT)
        replacements = {
            r["replaceAllText"]["containsText"]["text"]: r["replaceAllText"]["replaceText"]
            for r in requests
            if "replaceAllText" in r
        }
        assert replacements["[group1]"] == "EVEN"
        assert replacements["[group2]"] == "ODD"
        assert all(
            r["replaceAllText"]["containsText"]["matchCase"]
            for r in requests
            if "replaceAllText" in r
        )


@pytest.fixture
def drive() -> MagicMock:
    drive = MagicMock()
    drive.files.return_value.copy.return_value.execute.return_value = {"id": "doc-123"}
    return drive


@pytest.fixture
def docs() -> MagicMock:
    docs = MagicMock()
    docs.documents.return_value.get.return_value.execute.return_value = SAMPLE_DOCUMENT
    return docs


class TestBriefingGenerator:
    def test_generate_briefing(self, config, penalties, drive, docs) -> None:
        url = BriefingGenerator(config, drive, docs).generate_briefing(penalties)

        assert url == "https://docs.google.com/document/d/doc-123"
        drive.files.return_value.copy.assert_called_once_with(
            fileId="briefing-template",
            body={"name": "Drivers Briefing Round 2 at Spa", "parents": ["briefing-folder"]},
            supportsAllDrives=True,
        )
        docs.documents.return_value.get.assert_called_once_with(documentId="doc-123")
        batch = docs.documents.return_value.batchUpdate
        batch.assert_called_once()
        assert batch.call_args.kwargs["documentId"] == "doc-123"
        assert batch.call_args.kwargs["body"]["requests"] == build_briefing_requests(
            config, penalties, SAMPLE_DOCUMENT
        )

    def test_copy_failure(self, config, penalties, drive, docs) -> None:
        drive.files.return_value.copy.return_value.execute.side_effect = _http_error()
        with pytest.raises(BriefingError, match="failed to copy template briefing-template"):
            BriefingGenerator(config, drive, docs).generate_briefing(penalties)
        docs.documents.return_value.batchUpdate.assert_not_called()

    def test_revoked_credentials(self, config, penalties, drive, docs) -> None:
        drive.files.return_value.copy.return_value.execute.side_effect = RefreshError(
            "invalid_grant"
        )
        with pytest.raises(BriefingError, match="invalid_grant"):
            BriefingGenerator(config, drive, docs).generate_briefing(penalties)
        docs.documents.return_value.get.assert_not_called()

    def test_expired_credentials_on_update(self, config, penalties, drive, docs) -> None:
        docs.documents.return_value.batchUpdate.return_value.execute.side_effect = RefreshError(
            "token expired"
        )
        with pytest.raises(BriefingError, match="could not update the Briefing Doc"):
            BriefingGenerator(config, drive, docs).generate_briefing(penalties)

    def test_update_failure(self, config, penalties, drive, docs) -> None:
        docs.documents.return_value.batchUpdate.return_value.execute.side_effect = _http_error(400)
        with pytest.raises(BriefingError, match="could not update the Briefing Doc"):
            BriefingGenerator(config, drive, docs).generate_briefing(penalties)

    def test_missing_anchor_skips_update(self, config, penalties, drive, docs) -> None:
        docs.documents.return_value.get.return_value.execute.return_value = {"body": {"content": []}}
        with pytest.raises(BriefingError):
            BriefingGenerator(config, drive, docs).generate_briefing(penalties)
        docs.documents.return_value.batchUpdate.assert_not_called()

    def test_generate_penalty_tracker(self, config, drive, docs) -> None:
        drive.files.return_value.copy.return_value.execute.return_value = {"id": "sheet-9"}
        url = BriefingGenerator(config, drive, docs).generate_penalty_tracker(
            Round(number=3, track="Suzuka")
        )
        assert url == "https://docs.google.com/spreadsheets/d/sheet-9"
        drive.files.return_value.copy.assert_called_once_with(
            fileId="tracker-template",
            body={"name": "S12 Rookies Round 3 - Suzuka", "parents": ["tracker-folder"]},
            supportsAllDrives=True,
        )


class TestConnect:
    def test_application_default_credentials(self, config) -> None:
        credentials = MagicMock()
        with (
            patch("rookies_bot.briefing.google.auth.default", return_value=(credentials, "proj")),
            patch("rookies_bot.briefing.build") as build,
        ):
            BriefingGenerator.connect(config)
        services = [c.args[:2] for c in build.call_args_list]
        assert services == [("drive", "v3"), ("docs", "v1")]
        assert all(c.kwargs["credentials"] is credentials for c in build.call_args_list)

    def test_service_account_file(self, config) -> None:
        config = config.model_copy(update={"google_credentials_file": "sa.json"})
        with (
            patch(
                "rookies_bot.briefing.service_account.Credentials.from_service_account_file"
            ) as from_file,
            patch("rookies_bot.briefing.build"),
        ):
            BriefingGenerator.connect(config)
        assert from_file.call_args.args == ("sa.json",)

    def test_no_credentials(self, config) -> None:
        with patch(
            "rookies_bot.briefing.google.auth.default",
            side_effect=DefaultCredentialsError("no creds"),
        ):
            with pytest.raises(BriefingError, match="failed connecting to Google APIs"):
                BriefingGenerator.connect(config)
