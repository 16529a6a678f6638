"""
Services Layer

Pure business logic services that:
- Accept domain inputs (sessions, dates, raw strings)
- Return domain outputs (statuses, counts, aggregates)
- Do NOT depend on HTTP request/response objects
- Do NOT mutate data unless explicitly designed to (the status sweep does)
"""
