from pathlib import Path

from layertree.adapters import TelegramAdapter, parse_records

from .common import open_message_log, read_json_payload


def ingest(file: Path) -> None:
    payload = read_json_payload(file)
    messages = parse_records(payload)
    stored = open_message_log().insert_many(messages)
    print(f"Ingested {len(messages)} messages ({stored} new).")


def ingest_telegram(file: Path, self_user_id: str | None, channel: str | None) -> None:
    payload = read_json_payload(file)
    match payload:
        case list():
            tg_messages = payload
        case {"messages": list(inner)}:
            tg_messages = inner
        case _:
            tg_messages = [payload]

    adapter = TelegramAdapter(open_message_log(), self_user_id=self_user_id)
    ingested = adapter.ingest_batch(tg_messages, channel_override=channel)
    print(f"Ingested {len(ingested)} Telegram messages.")
