"""Constantes HTTP et du protocole de mises à jour pour éviter les valeurs magiques.

Ce module regroupe les codes de statut utilisés par le serveur ainsi que les noms d'en-têtes du
protocole Expo Updates, partagés entre le moteur de résolution et les routes.
"""

# Codes de statut HTTP courants
HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404
HTTP_METHOD_NOT_ALLOWED = 405
HTTP_INTERNAL_SERVER_ERROR = 500

# En-têtes de requête du protocole
HEADER_PROTOCOL_VERSION = "expo-protocol-version"
HEADER_PLATFORM = "expo-platform"
HEADER_RUNTIME_VERSION = "expo-runtime-version"
HEADER_CURRENT_UPDATE_ID = "expo-current-update-id"
HEADER_EMBEDDED_UPDATE_ID = "expo-embedded-update-id"
HEADER_EXPECT_SIGNATURE = "expo-expect-signature"

# Paramètres de requête équivalents
QUERY_PLATFORM = "platform"
QUERY_RUNTIME_VERSION = "runtime-version"

# En-têtes de réponse
HEADER_SFV_VERSION = "expo-sfv-version"
HEADER_SIGNATURE = "expo-signature"
CACHE_CONTROL_PRIVATE = "private, max-age=0"
SFV_VERSION = "0"

JSON_CONTENT_TYPE = "application/json"
JSON_UTF8_CONTENT_TYPE = "application/json; charset=utf-8"
