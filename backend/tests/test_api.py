"""
API tests for the results endpoints.
Run with: pytest backend/tests/ -v
"""
from io import BytesIO

import pytest
from httpx import AsyncClient, ASGITransport

from lyriccoach.core.scoring_client import ScoringAuthError, ScoringServiceError
from lyriccoach.core.session import ResultStore, load_demo
from lyriccoach.core.demo import demo_records


RAW_RESULTS = [
    {
        "filename": "a.wav",
        "score": 3,
        "explanation": "Plenty of room between lines.",
        "metrics": {
            "song_minutes": 2.0,
            "promptable_phrase_coverage": 0.6,
            "comfortable_gaps_per_minute": 2.0,
            "usable_density": 0.8,
            "promptable_phrases_per_minute": 7.0,
        },
    },
    {
        "filename": "b.mp3",
        "score": 1,
        "comfortable_gaps_per_minute": 0.3,
        "total_gaps_per_minute": 1.25,
        "avg_gap_duration_sec": 0.4,
        "duration_seconds": 180.0,
    },
]


class FakeScoringClient:
    """Stands in for the remote service; records every call."""

    def __init__(self, results=None, error=None):
        self.results = results if results is not None else RAW_RESULTS
        self.error = error
        self.calls = []

    async def score_batch(self, files, api_key=None):
        self.calls.append((list(files), api_key))
        if self.error is not None:
            raise self.error
        return self.results


@pytest.fixture
def store():
    return ResultStore()


@pytest.fixture
def scoring():
    return FakeScoringClient()


@pytest.fixture
async def client(store, scoring):
    """AsyncClient with a fresh session store and a fake scoring service."""
    from lyriccoach.main import app
    from lyriccoach.api.results import get_store, get_scoring_client

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_scoring_client] = lambda: scoring

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def _wav(name="a.wav"):
    return ("files", (name, BytesIO(b"RIFF....WAVE"), "audio/wav"))


@pytest.mark.asyncio
async def test_health(client):
    """The API answers on /health."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "version" in data


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert "docs" in response.json()


@pytest.mark.asyncio
async def test_upload_invalid_format(client, scoring):
    """Uploading a non-audio file gives 400 and never reaches the service."""
    response = await client.post(
        "/api/v1/results/upload",
        files=[("files", ("notes.txt", BytesIO(b"not audio"), "text/plain"))],
    )
    assert response.status_code == 400
    assert "Format not allowed" in response.json()["detail"]
    assert scoring.calls == []


@pytest.mark.asyncio
async def test_upload_without_files(client):
    response = await client.post("/api/v1/results/upload")
    assert response.status_code == 400
    assert response.json()["detail"] == "Please select at least one audio file."


@pytest.mark.asyncio
async def test_upload_too_large(client, scoring, monkeypatch):
    """An oversize file is rejected with 400 like any other invalid upload."""
    from lyriccoach.config import settings
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 0)

    response = await client.post("/api/v1/results/upload", files=[_wav("big.wav")])

    assert response.status_code == 400
    assert response.json()["detail"] == "big.wav exceeds 0 MB"
    assert scoring.calls == []


@pytest.mark.asyncio
async def test_list_results_empty(client):
    response = await client.get("/api/v1/results/")
    assert response.status_code == 200
    assert response.json()["results"] == []


@pytest.mark.asyncio
async def test_upload_scores_and_normalizes(client, store, scoring):
    response = await client.post(
        "/api/v1/results/upload",
        files=[_wav("a.wav"), _wav("b.wav")],
        headers={"X-API-Key": "secret"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status_message"] == "Processed 2 file(s)."
    assert data["error"] is None

    first, second = data["results"]
    assert first["filename"] == "a.wav"
    assert first["score_label"] == "Strong candidate"
    assert first["tier"] == "strong"
    assert first["badge_class"] == "score-badge score-strong"
    assert first["comfortable_gaps_per_minute"] == "2.00"
    assert first["total_gaps_per_minute"] == "n/a"
    assert second["score_label"] == "Probably not"
    assert second["total_gaps_per_minute"] == "1.25"

    files, api_key = scoring.calls[0]
    assert [name for name, _, _ in files] == ["a.wav", "b.wav"]
    assert api_key == "secret"

    assert len(store.current.records) == 2
    assert store.current.records[0].duration_seconds == 120.0
    assert store.current.api_key == "secret"


@pytest.mark.asyncio
async def test_cached_credential_is_reused(client, store, scoring):
    """The store is process-wide: a later upload without the header reuses the key."""
    await client.post("/api/v1/results/upload", files=[_wav()], headers={"X-API-Key": "secret"})
    await client.post("/api/v1/results/upload", files=[_wav()])
    assert scoring.calls[1][1] == "secret"


@pytest.mark.asyncio
async def test_unauthorized_forgets_credential(client, store, scoring):
    scoring.error = ScoringAuthError("Invalid API key. Please enter it again.")

    response = await client.post("/api/v1/results/upload", files=[_wav()], headers={"X-API-Key": "wrong"})

    assert response.status_code == 401
    assert store.current.api_key is None
    assert store.current.records == ()
    assert store.current.error == "Invalid API key. Please enter it again."


@pytest.mark.asyncio
async def test_service_failure_clears_previous_results(client, store, scoring):
    store.replace(load_demo(store.current, demo_records()))
    scoring.error = ScoringServiceError("Server responded with status 500")

    response = await client.post("/api/v1/results/upload", files=[_wav()])

    assert response.status_code == 502
    assert response.json()["detail"] == "Server responded with status 500"
    assert store.current.records == ()

    listing = (await client.get("/api/v1/results/")).json()
    assert listing["results"] == []
    assert listing["error"] == "Server responded with status 500"


@pytest.mark.asyncio
async def test_result_detail(client):
    await client.post("/api/v1/results/upload", files=[_wav()])

    response = await client.get("/api/v1/results/0")
    assert response.status_code == 200
    data = response.json()
    assert data["short_label"] == "Strong"
    assert data["deciding_factor"].startswith("There are 7.0 promptable phrases per minute")
    assert len(data["insights"]) == 3
    details = {d["label"]: d["value"] for d in data["details"]}
    assert details["Duration"] == "2:00 (120.0 sec)"
    assert details["Promptable phrase coverage"] == "60%"
    assert details["Total gaps"] == "n/a"
    assert details["Median gap length"] == "n/a"


@pytest.mark.asyncio
async def test_result_detail_out_of_range(client):
    response = await client.get("/api/v1/results/5")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_demo_results(client, scoring):
    response = await client.post("/api/v1/results/demo")
    assert response.status_code == 200
    data = response.json()
    assert len(data["results"]) == 3
    assert [r["score"] for r in data["results"]] == [3, 2, 1]
    assert scoring.calls == []


@pytest.mark.asyncio
async def test_export_empty(client):
    response = await client.get("/api/v1/results/export")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_export_csv(client):
    await client.post("/api/v1/results/upload", files=[_wav(), _wav("b.wav")])

    response = await client.get("/api/v1/results/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="lyric_coach_results.csv"' in response.headers["content-disposition"]

    lines = response.text.split("\r\n")
    assert lines[0].startswith("Filename,Score,Score label,Explanation,Duration seconds")
    assert lines[1].startswith("a.wav,3,Strong candidate,Plenty of room between lines.,120.000,")
    assert lines[2].startswith("b.mp3,1,Probably not,,180.000,")
    assert len(lines) == 3


@pytest.mark.asyncio
async def test_demo_mode_loads_examples_on_startup(monkeypatch):
    from lyriccoach.main import app, lifespan
    from lyriccoach.config import settings

    monkeypatch.setattr(settings, "DEMO_MODE", True)
    monkeypatch.setattr(app.state, "results", ResultStore())

    async with lifespan(app):
        assert len(app.state.results.current.records) == 3
