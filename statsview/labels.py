"""Display strings shared by the plain and rich renderers."""
from __future__ import annotations

TITLE = "Googol Stats"
TOP_TERMS_TITLE = "Top Pesquisas"
TOP_URLS_TITLE = "Top URLs"
BARRELS_TITLE = "Estado dos Barrels"

# empty-state messages: an empty collection is rendered as a message, never as nothing
NO_TERMS_MESSAGE = "Sem dados"
WAITING_BARRELS_MESSAGE = "A aguardar Barrels..."

CONNECTED_LABEL = "ligado"
DISCONNECTED_LABEL = "desligado"

WORDS_LABEL = "Palavras"
LINKS_LABEL = "Links"
LATENCY_LABEL = "Latência"
