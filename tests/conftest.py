import os
import sys
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure the app modules are importable when tests run from repo root
API_ROOT = Path(__file__).resolve().parents[1] / "api"
if str(API_ROOT) not in sys.path:
	sys.path.insert(0, str(API_ROOT))

os.environ.setdefault("SESSION_SECRET", "test-session-secret")

from auth import repository as auth_repository
from core import db
from main import app
from reports import repository as reports_repository
from sync import repository as sync_repository


class FakeUsers:
	"""In-memory stand-in for the users table."""

	def __init__(self):
		self.by_email = {}
		self._next_id = 1

	async def create_user(self, *, username, email, password_hash):
		email = auth_repository.normalize_email(email)
		if email in self.by_email:
			raise RuntimeError('duplicate key value violates unique constraint "users_email_lower_idx"')
		row = {
			"id": self._next_id,
			"username": username,
			"email": email,
			"password_hash": password_hash,
			"created_at": datetime.now(timezone.utc),
		}
		self._next_id += 1
		self.by_email[email] = row
		return {k: v for k, v in row.items() if k != "password_hash"}

	async def get_user_by_email(self, email):
		return self.by_email.get(auth_repository.normalize_email(email))


class FakeTables:
	"""In-memory stand-in for the synced tables, keyed by table then id."""

	def __init__(self):
		self.rows = defaultdict(dict)
		self.fail_insert_ids = set()

	async def record_exists(self, table, record_id):
		return record_id in self.rows[table]

	async def insert_record(self, table, columns, values):
		row = dict(zip(columns, values))
		if row["id"] in self.fail_insert_ids:
			raise RuntimeError(f"insert failed for id {row['id']}")
		if row["id"] in self.rows[table]:
			raise RuntimeError("duplicate key value violates unique constraint")
		self.rows[table][row["id"]] = row

	def all(self, table):
		return list(self.rows[table].values())


@pytest.fixture(autouse=True)
def patch_db(monkeypatch):
	async def _noop():
		return None

	monkeypatch.setattr(db, "init_pool", _noop)
	monkeypatch.setattr(db, "close_pool", _noop)


@pytest.fixture
def fake_users(monkeypatch):
	users = FakeUsers()
	monkeypatch.setattr(auth_repository, "create_user", users.create_user)
	monkeypatch.setattr(auth_repository, "get_user_by_email", users.get_user_by_email)
	return users


@pytest.fixture
def fake_tables(monkeypatch):
	tables = FakeTables()
	monkeypatch.setattr(sync_repository, "record_exists", tables.record_exists)
	monkeypatch.setattr(sync_repository, "insert_record", tables.insert_record)

	async def list_msv_visits():
		return tables.all("MSVTable")

	async def get_msv_visit(record_id):
		return tables.rows["MSVTable"].get(record_id)

	async def list_client_submissions():
		return sorted(tables.all("ClientsTable"), key=lambda r: r.get("qtr") or "", reverse=True)

	async def get_client_submission(record_id):
		return tables.rows["ClientsTable"].get(record_id)

	async def list_attendance():
		return tables.all("attendance_records")

	monkeypatch.setattr(reports_repository, "list_msv_visits", list_msv_visits)
	monkeypatch.setattr(reports_repository, "get_msv_visit", get_msv_visit)
	monkeypatch.setattr(reports_repository, "list_client_submissions", list_client_submissions)
	monkeypatch.setattr(reports_repository, "get_client_submission", get_client_submission)
	monkeypatch.setattr(reports_repository, "list_attendance", list_attendance)
	return tables


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client


@pytest_asyncio.fixture
async def signed_in_client(api_client, fake_users):
	await api_client.post(
		"/signup",
		data={"username": "ada", "email": "ada@example.org", "password": "correct horse"},
	)
	resp = await api_client.post(
		"/signin",
		data={"email": "ada@example.org", "password": "correct horse"},
	)
	assert resp.status_code == 303
	return api_client


def msv_submission(record_id, **overrides):
	record = {
		"_id": record_id,
		"formhub/uuid": "f1e2d3",
		"start": "2024-03-01T09:00:00.000+01:00",
		"end": "2024-03-01T10:15:00.000+01:00",
		"msvModule": "cbo_office",
		"state": "Kano",
		"lga": "Nassarawa",
		"Monitor_Name": "Hauwa Bello",
		"Monitor_Designation": "SPO",
		"Reporting_Period": "Q1",
		"Reporting_Year": 2024,
		"Visit_Date": "2024-03-01",
		"CBOOfficeVisitModule/cboNameVisited": "Hope Foundation",
		"CBOOfficeVisitModule/ward": "Gama",
		"CBOOfficeVisitModule/HF": "Gama PHC",
		"__version__": "vGx7",
		"meta/instanceID": f"uuid:{record_id}",
		"_xform_id_string": "aMsv",
		"_uuid": f"uuid-{record_id}",
		"_status": "submitted_via_web",
		"_geolocation": [12.0022, 8.5919],
		"_submission_time": "2024-03-01T09:16:02",
		"_submitted_by": None,
	}
	record.update(overrides)
	return record


def attendance_submission(record_id, participants=1, **overrides):
	record = {
		"_id": record_id,
		"formhub/uuid": "a9b8c7",
		"eAtt/Level": "State",
		"eAtt/Venue": "Secretariat hall",
		"eAtt/NameActivityy": "Quarterly review",
		"eAtt/statelist": "Kano",
		"eAtt/NameOfFiller": "Musa Idris",
		"eAtt/attendance": [
			{
				"eAtt/attendance/MeetingVenue": "Secretariat hall",
				"eAtt/attendance/NameOfPersonFillingAttendance": "Musa Idris",
				"eAtt/attendance/DateOfActivity": "2024-02-14",
				"eAtt/attendance/NameActivity": "Quarterly review",
				"eAtt/attendance/ParticipantName": f"Participant {i}",
				"eAtt/attendance/ParticipantOrg": "SMoH",
				"eAtt/attendance/sex": "female",
				"eAtt/attendance/Designation": "M&E officer",
				"eAtt/attendance/EmailAdd": f"p{i}@example.org",
				"eAtt/attendance/state": "Kano",
			}
			for i in range(participants)
		],
	}
	record.update(overrides)
	return record
