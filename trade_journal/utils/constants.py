"""Broker CSV vocabulary and shared defaults."""

# Canonical Ebinex export header, in export order
EXPECTED_HEADERS = [
    "ID",
    "Data",
    "Ativo",
    "Tempo",
    "Previsão",
    "Vela",
    "P. ABRT",
    "P. FECH",
    "Valor",
    "Estornado",
    "Executado",
    "Status",
    "Resultado",
]

# Known spellings seen in hand-edited or re-exported files
HEADER_VARIATIONS: dict[str, list[str]] = {
    "ID": ["id", "Id", "trade_id", "tradeId"],
    "Data": ["data", "Data", "date", "Date", "timestamp"],
    "Ativo": ["ativo", "Ativo", "asset", "Asset", "symbol"],
    "Tempo": ["tempo", "Tempo", "time", "Time", "timeframe"],
    "Previsão": ["previsão", "Previsão", "previsao", "Previsao", "direction", "Direction"],
    "Vela": ["vela", "Vela", "candle", "Candle", "candleTime"],
    "P. ABRT": ["p. abrt", "P. ABRT", "entry_price", "Entry Price", "open_price"],
    "P. FECH": ["p. fech", "P. FECH", "exit_price", "Exit Price", "close_price"],
    "Valor": ["valor", "Valor", "amount", "Amount", "stake"],
    "Estornado": ["estornado", "Estornado", "refunded", "Refunded"],
    "Executado": ["executado", "Executado", "executed", "Executed"],
    "Status": ["status", "Status", "result_status"],
    "Resultado": ["resultado", "Resultado", "profit", "Profit", "pnl"],
}

DIRECTIONS = {"BULL": "call", "BEAR": "put"}
STATUSES = ("WIN", "LOSE")
RESULTS = ("win", "loss", "tie")

# Lookback period label -> window length in days
PERIOD_DAYS: dict[str, int] = {
    "daily": 1,
    "weekly": 7,
    "monthly": 30,
    "yearly": 365,
}
DEFAULT_PERIOD = "weekly"
