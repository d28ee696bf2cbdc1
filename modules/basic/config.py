# Keyword choices for the flip command
COIN_SIDES = frozenset({"heads", "tails"})

MAX_NOTE_LENGTH = 500
NOTE_NOT_FOUND = "📭 I don't remember anything called `{name}`."
NOTE_SAVED = "📝 Saved `{name}` (#{document_id})."
