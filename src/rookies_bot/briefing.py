"""Briefing doc and penalty tracker generation on Google Drive/Docs."""

from __future__ import annotations

import logging
from typing import Any

import google.auth
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from rookies_bot.api_logging import log_api_call
from rookies_bot.config import Config, Round
from rookies_bot.exceptions import BriefingError
from rookies_bot.models.driver import Driver
from rookies_bot.models.penalties import CATEGORIES, Penalties

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/documents",
]

ANCHOR_STYLE = "HEADING_3"
ANCHOR_PREFIX = "Stream"
PENALTIES_HEADING = "Drivers Serving Penalties Tonight"

DOC_URL = "https://docs.google.com/document/d/{}"
SHEET_URL = "https://docs.google.com/spreadsheets/d/{}"


def utf16_len(text: str) -> int:
    """Length of ``text`` as counted by Docs indices (UTF-16 code units)."""
    return len(text.encode("utf-16-le")) // 2


def find_anchor_index(document: dict[str, Any]) -> int:
    """Start index of the last H3 heading that begins with "Stream".

    Raises:
        BriefingError: If the document has no such heading.
    """
    anchor: int | None = None
    for element in document.get("body", {}).get("content", []):
        paragraph = element.get("paragraph")
        if not paragraph:
            continue
        style = paragraph.get("paragraphStyle", {}).get("namedStyleType")
        runs = paragraph.get("elements", [])
        if style != ANCHOR_STYLE or not runs:
            continue
        if runs[0].get("textRun", {}).get("content", "").startswith(ANCHOR_PREFIX):
            anchor = element["startIndex"]
    if anchor is None:
        raise BriefingError(
            f"could not find H3 '{ANCHOR_PREFIX}' to start inserting penalty data ahead of"
        )
    return anchor


def replace_text(find: str, replace: str) -> dict[str, Any]:
    return {
        "replaceAllText": {
            "containsText": {"matchCase": True, "text": find},
            "replaceText": replace,
        }
    }


def heading_requests(index: int, style: str, text: str) -> list[dict[str, Any]]:
    text_range = {"startIndex": index, "endIndex": index + utf16_len(text)}
    return [
        {"insertText": {"location": {"index": index}, "text": text}},
        {"deleteParagraphBullets": {"range": text_range}},
        {
            "updateParagraphStyle": {
                "range": text_range,
                "fields": "*",
                "paragraphStyle": {"namedStyleType": style},
            }
        },
    ]


def penalty_entry_requests(index: int, text: str) -> list[dict[str, Any]]:
    text_range = {"startIndex": index, "endIndex": index + utf16_len(text)}
    return [
        {"insertText": {"location": {"index": index}, "text": text}},
        {
            "createParagraphBullets": {
                "range": text_range,
                "bulletPreset": "BULLET_DISC_CIRCLE_SQUARE",
            }
        },
        {
            "updateParagraphStyle": {
                "range": text_range,
                "fields": "*",
                "paragraphStyle": {
                    "namedStyleType": "NORMAL_TEXT",
                    "indentFirstLine": {"magnitude": 18, "unit": "PT"},
                    "indentStart": {"magnitude": 36, "unit": "PT"},
                    "spacingMode": "COLLAPSE_LISTS",
                    "direction": "LEFT_TO_RIGHT",
                },
            }
        },
    ]


def _entry_text(driver: Driver, carried_over: bool = False) -> str:
    suffix = " (carried over)" if carried_over else ""
    return f"#{driver.car_number:03d} - {driver.full_name}{suffix}\n"


def build_briefing_requests(
    config: Config, penalties: Penalties, document: dict[str, Any]
) -> list[dict[str, Any]]:
    """Requests that add the penalty section and fill in template placeholders.

    Every block is inserted at the anchor index, so blocks are emitted in
    reverse of the order they should read in.
    """
    index = find_anchor_index(document)

    blocks: list[tuple[str, str]] = [("HEADING_3", f"{PENALTIES_HEADING}\n")]
    for category in CATEGORIES:
        blocks.append(("HEADING_4", f"{category.doc_heading}\n"))
        carried_over = penalties.carried_over(category.key)
        new = penalties.new(category.key)
        if not carried_over and not new:
            blocks.append(("ENTRY", "None!\n"))
            continue
        blocks.extend(("ENTRY", _entry_text(d, carried_over=True)) for d in carried_over)
        blocks.extend(("ENTRY", _entry_text(d)) for d in new)

    requests: list[dict[str, Any]] = []
    for kind, text in reversed(blocks):
        if kind == "ENTRY":
            requests.extend(penalty_entry_requests(index, text))
        else:
            requests.extend(heading_requests(index, kind, text))

    number = config.next_round.number
    group1, group2 = ("EVEN", "ODD") if number % 2 == 0 else ("ODD", "EVEN")
    requests += [
        replace_text("[num]", str(number)),
        replace_text("[Track Name]", config.next_round.track),
        replace_text("[group1]", group1),
        replace_text("[group2]", group2),
        replace_text("[briefing time]", config.briefing_time_text),
        replace_text("[SEASON]", config.season),
    ]
    return requests


def _credentials(config: Config) -> Any:
    if config.google_credentials_file:
        return service_account.Credentials.from_service_account_file(
            config.google_credentials_file, scopes=SCOPES
        )
    credentials, _ = google.auth.default(scopes=SCOPES)
    return credentials


class BriefingGenerator:
    """Copies Drive templates and fills in the briefing doc.

    ``drive`` and ``docs`` are googleapiclient service objects.
    """

    def __init__(self, config: Config, drive: Any, docs: Any) -> None:
        self._config = config
        self._drive = drive
        self._docs = docs

    @classmethod
    def connect(cls, config: Config) -> BriefingGenerator:
        """Build Drive and Docs services from the configured credentials."""
        try:
            credentials = _credentials(config)
            drive = build("drive", "v3", credentials=credentials, cache_discovery=False)
            docs = build("docs", "v1", credentials=credentials, cache_discovery=False)
        except (GoogleAuthError, OSError, ValueError) as exc:
            raise BriefingError(f"failed connecting to Google APIs: {exc}") from exc
        return cls(config, drive, docs)

    @log_api_call
    def generate_briefing(self, penalties: Penalties) -> str:
        """Copy the briefing template for the next round and add its penalties.

        Returns:
            URL of the new briefing doc.
        """
        next_round = self._config.next_round
        file_id = self._copy_file(
            self._config.briefing_template_doc_id,
            self._config.briefing_folder_id,
            f"Drivers Briefing Round {next_round.number} at {next_round.track}",
        )

        try:
            document = self._docs.documents().get(documentId=file_id).execute()
        except (HttpError, GoogleAuthError) as exc:
            raise BriefingError(f"failed getting Briefing Doc: {exc}") from exc

        requests = build_briefing_requests(self._config, penalties, document)
        try:
            self._docs.documents().batchUpdate(
                documentId=file_id, body={"requests": requests}
            ).execute()
        except (HttpError, GoogleAuthError) as exc:
            raise BriefingError(f"could not update the Briefing Doc: {exc}") from exc

        url = DOC_URL.format(file_id)
        logger.info("Generated briefing doc %s", url)
        return url

    @log_api_call
    def generate_penalty_tracker(self, round_: Round) -> str:
        """Copy the penalty tracker spreadsheet template for ``round_``."""
        file_id = self._copy_file(
            self._config.tracker_template_doc_id,
            self._config.tracker_folder_id,
            f"{self._config.season} Rookies Round {round_.number} - {round_.track}",
        )
        url = SHEET_URL.format(file_id)
        logger.info("Generated penalty tracker %s", url)
        return url

    def _copy_file(self, template_id: str, folder_id: str, title: str) -> str:
        try:
            copied = (
                self._drive.files()
                .copy(
                    fileId=template_id,
                    body={"name": title, "parents": [folder_id]},
                    supportsAllDrives=True,
                )
                .execute()
            )
        except (HttpError, GoogleAuthError) as exc:
            raise BriefingError(
                f"failed to copy template {template_id} to folder {folder_id}: {exc}"
            ) from exc
        return copied["id"]
