"""flashdeck practice-session engine."""
