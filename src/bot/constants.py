# Cooldown against spam (seconds)
COOLDOWN_SPIN_SECONDS = 0.5

# How many entries /history and /favorites show
HISTORY_DISPLAY_LIMIT = 10
FAVORITES_DISPLAY_LIMIT = 20

# Payload fields shown under a result, in this order
RESULT_DETAIL_FIELDS = [
    ("tier", "Tier"),
    ("difficulty", "Difficulty"),
    ("playstyle", "Playstyle"),
    ("damageType", "Damage"),
    ("source", "Source"),
    ("league", "League"),
]

# Message shown when the user is asked to wait for the wheel
SPINNING_MESSAGE = "🎡 *Spinning\\.\\.\\.*"

# Reasons of InvalidSpinRequest -> emoji prefix
SPIN_REJECT_ICONS = {
    "already_spinning": "⏱️",
    "all_locked": "🔒",
    "nothing_to_spin": "❌",
}
