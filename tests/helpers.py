"""In-memory stores and profile factories shared by the test modules."""
from datetime import datetime, timezone

from app.schemas.match import MatchRecord, SwipeAction, SwipeDecision
from app.schemas.profile import Profile


# ── In-memory stores ──────────────────────────────────────────────────────────

class FakeProfileStore:
    """Profile store over a dict, honouring the store query contract."""

    def __init__(self, profiles=None, blocks=None):
        self.profiles = {p.uid: p for p in (profiles or [])}
        self.blocks = list(blocks or [])  # (blocker_id, blocked_id)
        self.queries = []

    def add(self, *profiles):
        for p in profiles:
            self.profiles[p.uid] = p

    async def get_profile(self, uid):
        return self.profiles.get(uid)

    async def query_profiles(self, genders, city=None, limit=100):
        genders = set(genders)
        self.queries.append({"genders": genders, "city": city, "limit": limit})
        rows = [
            p for p in self.profiles.values()
            if p.has_profile
            and p.has_preferences
            and p.gender in genders
            and (city is None or p.city == city)
        ]
        return rows[:limit]

    async def list_blocked_ids(self, uid):
        blocked = set()
        for blocker, target in self.blocks:
            if blocker == uid:
                blocked.add(target)
            elif target == uid:
                blocked.add(blocker)
        return blocked


class FakeSwipeStore:
    def __init__(self):
        self.decisions = {}

    async def get_decision(self, from_id, to_id):
        return self.decisions.get((from_id, to_id))

    async def list_outbound_decisions(self, from_id):
        return [d for (f, _), d in self.decisions.items() if f == from_id]

    async def upsert_decision(self, from_id, to_id, action):
        self.decisions[(from_id, to_id)] = SwipeDecision(
            from_user_id=from_id,
            to_user_id=to_id,
            action=SwipeAction(action),
            timestamp=datetime.now(timezone.utc),
        )


class FakeMatchStore:
    def __init__(self):
        self.matches = {}
        self.create_calls = 0

    async def get_match(self, match_id):
        return self.matches.get(match_id)

    async def create_match(self, record: MatchRecord):
        self.create_calls += 1
        self.matches.setdefault(record.match_id, record)

    async def list_matches_for_user(self, uid):
        return [m for m in self.matches.values() if uid in (m.user1_id, m.user2_id)]


# ── Factories ────────────────────────────────────────────────────────────────

def make_profile(uid, **overrides):
    """Build an eligible profile; any field can be overridden."""
    data = {
        "uid": uid,
        "gender": "female",
        "gender_preferences": ["male"],
        "relationship_intent": ["romance"],
        "city": "Istanbul",
        "has_profile": True,
        "has_preferences": True,
    }
    data.update(overrides)
    return Profile.model_validate(data)


