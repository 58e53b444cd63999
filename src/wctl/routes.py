"""
HTTP routes and header names exposed by the ledger node.
"""

ROUTE_SESSION_INIT = "/session/init"

ROUTE_TX_LIST = "/tx"
ROUTE_TX_SEND = "/tx/send"

ROUTE_TX_POLL = "/poll/tx"
ROUTE_ACCOUNT_POLL = "/poll/accounts"

ROUTE_ACCOUNT_LOAD = "/accounts"
ROUTE_LEDGER_STATE = "/ledger"
ROUTE_SERVER_VERSION = "/server/version"
ROUTE_STATS_RESET = "/debug/stats/reset"
ROUTE_CONTRACT_SEND = "/contract/send"

HEADER_SESSION_TOKEN = "X-Session-Token"
HEADER_USER_AGENT = "User-Agent"
HEADER_CONTENT_TYPE = "Content-Type"

UPLOAD_FORM_FIELD = "uploadFile"

# Sub-kinds for the transaction poll stream
EVENT_ACCEPTED = "accepted"
EVENT_APPLIED = "applied"
