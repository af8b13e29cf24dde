"""
Field mappings from upstream form submissions to table columns.

Each source is a `SourceSpec`: the target table plus an ordered list of
`Column`s, each pairing a column name with an extractor over the raw
submission. Keys follow the upstream export format, where grouped questions
are prefixed with their group path (`group_oc0ad95/state`) and repeat groups
arrive as a list of dicts under the group key (`eAtt/attendance`).

Extractors:
- `field`     value as-is, None when the key is missing
- `optional`  any falsy value (missing, "", 0, false) becomes None
- `timestamp` like `field`, with a trailing "Z" removed
- `geolocation` two-element `_geolocation` -> "POINT(lat lon)" or None
- `repeat`    value from the first entry of a repeat group
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable

from core import settings

Record = dict[str, Any]
Extractor = Callable[[Record], Any]

ATTENDANCE_GROUP = "eAtt/attendance"


@dataclass(frozen=True)
class Column:
    name: str
    extract: Extractor


@dataclass(frozen=True)
class SourceSpec:
    name: str
    table: str
    url: Callable[[], str]
    columns: tuple[Column, ...]
    # Records failing this check are skipped without touching the table.
    accepts: Callable[[Record], bool] = lambda record: True

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


def field(key: str) -> Extractor:
    return lambda record: record.get(key)


def optional(key: str) -> Extractor:
    return lambda record: record.get(key) or None


def timestamp(key: str) -> Extractor:
    def _extract(record: Record) -> Any:
        value = record.get(key)
        if not value:
            return None
        return str(value).removesuffix("Z")

    return _extract


def _coordinate_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def geolocation(record: Record) -> str | None:
    coords = record.get("_geolocation")
    if not isinstance(coords, (list, tuple)) or len(coords) != 2:
        return None
    lat, lon = coords
    if not (_coordinate_present(lat) and _coordinate_present(lon)):
        return None
    return f"POINT({lat} {lon})"


def repeat(group: str, key: str) -> Extractor:
    def _extract(record: Record) -> Any:
        entries = record.get(group)
        if not isinstance(entries, list) or not entries or not isinstance(entries[0], dict):
            return None
        return entries[0].get(f"{group}/{key}")

    return _extract


def record_key(record: Record) -> int | None:
    """
    Upstream `_id` as an int, or None when it is missing or not numeric.
    """
    raw = record.get("_id")
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float) and not raw.is_integer():
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def to_text(value: Any) -> str | None:
    """
    Column values are stored as text; containers are stored as JSON.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def map_record(spec: SourceSpec, record: Record) -> list[Any]:
    """
    Positional insert values for `record`, in `spec.columns` order.

    The first column is always the integer key; everything else is text.
    """
    key = record_key(record)
    if key is None:
        raise ValueError("Record has no usable _id.")
    values: list[Any] = [key]
    for column in spec.columns[1:]:
        values.append(to_text(column.extract(record)))
    return values


def _group(prefix: str, keys: list[str], *, extractor: Callable[[str], Extractor] = field) -> list[Column]:
    return [Column(key, extractor(f"{prefix}/{key}")) for key in keys]


_CBO = "CBOOfficeVisitModule"

MSV = SourceSpec(
    name="msv",
    table="MSVTable",
    url=settings.msv_api_url,
    columns=(
        Column("id", field("_id")),
        Column("formhub_uuid", field("formhub/uuid")),
        Column("start_time", field("start")),
        Column("end_time", field("end")),
        Column("msvModule", field("msvModule")),
        Column("state", field("state")),
        Column("lga", field("lga")),
        Column("Monitor_Name", field("Monitor_Name")),
        Column("Monitor_Designation", field("Monitor_Designation")),
        Column("Reporting_Period", field("Reporting_Period")),
        Column("Reporting_Year", field("Reporting_Year")),
        Column("Visit_Date", field("Visit_Date")),
        Column("cboNameVisited", optional(f"{_CBO}/cboNameVisited")),
        Column("ward", optional(f"{_CBO}/ward")),
        Column("community", optional(f"{_CBO}/Community")),
        Column("HF", optional(f"{_CBO}/HF")),
        Column("cbo_rating", optional(f"{_CBO}/CBOimplenetationRating")),
        Column(
            "documentation_of_activities",
            optional(f"{_CBO}/How_is_the_documentation_of_your_activities_done_on_the_project"),
        ),
        Column("participation_trad_leader", optional(f"{_CBO}/LevelOfParticipationTradLeader")),
        Column("participation_religious_leader", optional(f"{_CBO}/LevelOfParticipationReligiousLeader")),
        Column("participation_political_leader", optional(f"{_CBO}/LevelOfParticipationPoliticalLeader")),
        Column("participation_private_sector", optional(f"{_CBO}/LevelOfParticipationPrivateSector")),
        Column("issues_affecting_quality", optional(f"{_CBO}/IssuesAffectngQualityOfMalSevice")),
        Column(
            "community_participation_adv_visit",
            optional(f"{_CBO}/LevelOfCommunityParticipationonAdvVisit"),
        ),
        Column("success_story_achieved", optional(f"{_CBO}/DidYouAchieveSuccessStory")),
        Column("success_stories_list", optional(f"{_CBO}/ListOfSuccessStories")),
        Column("cost_of_success_story", optional(f"{_CBO}/CostOfSuccessStory")),
        Column("cat_member_challenges", optional(f"{_CBO}/AnyCATMemberChallenges")),
        Column("list_of_cat_member_challenges", optional(f"{_CBO}/ListCATMemberChallenges")),
        Column("spo_visit_count", optional(f"{_CBO}/NumberOfTimesSPOvisitCBO")),
        Column("satisfied_with_supervision", optional(f"{_CBO}/SatisfiedWithLevelOfSupervision")),
        Column("org_requires_more_support", optional(f"{_CBO}/DoesOrgRequireMoreSupport")),
        Column("version", field("__version__")),
        Column("meta_instanceID", field("meta/instanceID")),
        Column("xform_id_string", field("_xform_id_string")),
        Column("uuid", field("_uuid")),
        Column("status", field("_status")),
        Column("geolocation", geolocation),
        Column("submission_time", field("_submission_time")),
        Column("submitted_by", optional("_submitted_by")),
    ),
)

CLIENTS = SourceSpec(
    name="clients",
    table="ClientsTable",
    url=settings.client_api_url,
    columns=(
        Column("id", field("_id")),
        Column("formhub_uuid", field("formhub/uuid")),
        Column("start_time", timestamp("start")),
        Column("end_time", timestamp("end")),
        Column("today", timestamp("today")),
        Column("consent", field("group_oc0ad90/consent")),
        *_group(
            "group_oc0ad95",
            [
                "service_cat",
                "serv_received",
                "freq_visit",
                "year",
                "qtr",
                "month",
                "state",
                "lga",
                "cbo",
                "cboemail",
                "ward",
                "hf",
                "resp_name",
                "resp_cat",
                "resp_edu",
            ],
        ),
        Column("store_gps", field("store_gps")),
        Column("__version__", field("__version__")),
        Column("meta_instanceID", field("meta/instanceID")),
        Column("xform_id_string", field("_xform_id_string")),
        Column("uuid", field("_uuid")),
        Column("status", field("_status")),
        Column("submission_time", field("_submission_time")),
        Column("submitted_by", optional("_submitted_by")),
        Column("geolocation", geolocation),
        # HIV block
        *_group(
            "group_oc0ad92",
            [
                "hiv_info",
                "infohiv_source",
                "hiv_prev",
                "kindofserv",
                "hivduration",
                "hivattitude",
                "hivgender_hw",
                "hivmed_given",
                "hivdrug_side",
                "hivdescrimination",
                "hivassess_quality",
            ],
        ),
        # Malaria block
        *_group(
            "group_oc0ad91",
            [
                "attitude",
                "mal_info",
                "info_source",
                "prev_how",
                "given_med",
                "side_effect",
                "access_hf",
                "attended_by_hf",
                "offer_anc",
                "receive_ipt",
                "free_mal_aware",
                "payto_receive",
                "tested",
                "result_tested",
            ],
            extractor=optional,
        ),
        # TB block
        *_group(
            "group_oc0ad93",
            [
                "tb_info",
                "tb_source",
                "prev_tb",
                "tbdrug_given",
                "drug_sideeffect",
                "tbsideeffect_exp",
                "tbaccess_hf",
                "tbhw",
                "tbanc",
                "freetbaware",
                "tbservdeny",
                "kindtbserv",
                "paytbserv",
                "tbduration",
                "tbattitude",
            ],
            extractor=optional,
        ),
        Column("child_name", optional("group_oc0ad95/child_name")),
        Column("assess_quality", field("group_oc0ad91/assess_quality")),
        Column("tbassess_quality", field("group_oc0ad93/tbassess_quality")),
    ),
)


def has_attendance(record: Record) -> bool:
    entries = record.get(ATTENDANCE_GROUP)
    return isinstance(entries, list) and len(entries) > 0


ATTENDANCE = SourceSpec(
    name="attendance",
    table="attendance_records",
    url=settings.attendance_api_url,
    accepts=has_attendance,
    columns=(
        Column("id", field("_id")),
        Column("formhub_uuid", field("formhub/uuid")),
        Column("eAtt_level", field("eAtt/Level")),
        Column("eAtt_venue", field("eAtt/Venue")),
        Column("eAtt_name_activity", field("eAtt/NameActivityy")),
        Column("eAtt_state_list", field("eAtt/statelist")),
        Column("eAtt_name_of_filler", field("eAtt/NameOfFiller")),
        Column("meeting_venue", repeat(ATTENDANCE_GROUP, "MeetingVenue")),
        Column("name_of_person_filling_attendance", repeat(ATTENDANCE_GROUP, "NameOfPersonFillingAttendance")),
        Column("date_of_activity", repeat(ATTENDANCE_GROUP, "DateOfActivity")),
        Column("name_activity", repeat(ATTENDANCE_GROUP, "NameActivity")),
        Column("participant_name", repeat(ATTENDANCE_GROUP, "ParticipantName")),
        Column("participant_org", repeat(ATTENDANCE_GROUP, "ParticipantOrg")),
        Column("sex", repeat(ATTENDANCE_GROUP, "sex")),
        Column("Designation", repeat(ATTENDANCE_GROUP, "Designation")),
        Column("email_address", repeat(ATTENDANCE_GROUP, "EmailAdd")),
        Column("state", repeat(ATTENDANCE_GROUP, "state")),
    ),
)

SOURCES: dict[str, SourceSpec] = {spec.name: spec for spec in (MSV, CLIENTS, ATTENDANCE)}
