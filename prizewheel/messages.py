from .constants import CAP, NO_WIN, TOTE_BAG, TSHIRT

PRIZE_BLURBS = {
    TOTE_BAG: "Perfect for carrying your essentials in style!",
    CAP: "Show off your pride with this stylish cap!",
    TSHIRT: "A classic choice that never goes out of style!",
    NO_WIN: "Oh no... Better luck next time!",
}

RULE_TITLES = {
    "major": "Guaranteed grand prize",
    "minor": "Guaranteed bonus prize",
    "fallback": "Regular spin",
}


def result_headline(label: str, fallback_label: str = NO_WIN) -> str:
    if label == fallback_label:
        return "😔 Oh no..."
    return "🎉 Congratulations! You Won!"


def result_blurb(label: str) -> str:
    return PRIZE_BLURBS.get(label, f"You won: {label}!")


def rule_title(rule: str) -> str:
    return RULE_TITLES.get(rule, rule.title())


def already_spinning() -> str:
    return "Already spinning… please wait."


def state_line(spin_number: int, rotation: float, in_progress: bool) -> str:
    status = "spinning" if in_progress else "idle"
    return f"Spin counter: **{spin_number}** · rotation **{rotation:.1f}°** · {status}"
