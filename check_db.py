"""
Print what the SQLite store holds: owners, favorites and stored results
"""
import json
import sqlite3

from config.config import DB_PATH

if not DB_PATH.exists():
    print(f"File {DB_PATH} not found.")
else:
    conn = sqlite3.connect(DB_PATH)
    cur = conn.cursor()

    try:
        cur.execute("SELECT owner_id, favorites_json, sound_enabled, updated_at FROM preferences")
        rows = cur.fetchall()
        print(f"preferences: {len(rows)} owners")
        for owner_id, favorites_json, sound_enabled, updated_at in rows:
            favorites = json.loads(favorites_json)
            print(f"  {owner_id}: {len(favorites)} favorites, sound={'on' if sound_enabled else 'off'} ({updated_at})")

        cur.execute("SELECT owner_id, history_json, updated_at FROM spin_history")
        rows = cur.fetchall()
        print(f"spin_history: {len(rows)} owners")
        for owner_id, history_json, updated_at in rows:
            history = json.loads(history_json)
            last = history[0] if history else None
            shown = f"{last['class']['name']} / {last['skill']['name']}" if last and last.get('class') and last.get('skill') else "-"
            print(f"  {owner_id}: {len(history)} results, last: {shown} ({updated_at})")
    except sqlite3.OperationalError as e:
        print(f"Schema error: {e} (run the bot or web server once to create the tables)")

    conn.close()
