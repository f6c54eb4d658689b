# Vision board: board document model, storage backends and client-side sync
#
# Components:
#   schema.py     - Data model (Sticker, Note, Card, Position, Collection)
#   board.py      - Pure add/update/replace/remove/move operations on a document
#   store.py      - Storage adapters (sqlite local store, JSON file store)
#   session.py    - Reducer and session that persists every change
#   api_client.py - HTTP client for board_server's /api routes
#   config.py     - YAML + environment configuration
