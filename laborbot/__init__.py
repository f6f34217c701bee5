"""勞基法小幫手 — a LINE bot answering Taiwan Labor Standards Act questions.

Architecture Overview
=====================

Every inbound text goes through :class:`laborbot.resolver.IntentResolver`,
an ordered chain of matchers where the first match wins:

1. exact commands (menu, category examples)
2. explicit AI mode (``ai/ ...``, ``ai/ 詳細 ...``)
3. overtime pay calculator (``加班費試算 時薪=183 平日=3``)
4. article-number lookup (``勞基法第24條``)
5. FAQ keyword match
6. article keyword match
7. AI fallback, then static guidance

Key Design Decisions
--------------------
- **Local first**: the article and FAQ snapshots are immutable tuples
  loaded once at start-up; lookups are plain in-memory scans.  A missing
  data file degrades to an empty index instead of crashing.
- **AI resilience**: :mod:`laborbot.services.answer_gateway` gives each
  question a detailed → reduced → concise ladder, each tier with its own
  timeout, token budget and retry sequence (exponential backoff + jitter).
  When every tier fails the user still gets a locally written message.
- **No globals in the core**: indices, gateway and settings are bundled in
  a ``ResolverContext`` built by the FastAPI lifespan and injected.
- **Failure isolation**: webhook events run concurrently and one failing
  event never blocks the others or the 200 acknowledgement.

Package Structure
-----------------
- ``laborbot/config.py`` — environment / SSM configuration and ``Settings``
- ``laborbot/resolver.py`` — matchers and the intent resolver
- ``laborbot/prompts.py`` — AI prompts per tier
- ``laborbot/messages.py`` — static reply templates
- ``laborbot/server.py`` — FastAPI application
- ``laborbot/main.py`` — CLI chat loop
- ``laborbot/services/`` — AI client, retry engine, gateway, LINE client, metrics
- ``laborbot/tools/`` — article/FAQ indices, reference extraction, pay calculator
- ``laborbot/api/`` — FastAPI routes, schemas and the event dispatcher
"""
