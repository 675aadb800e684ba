from __future__ import annotations

from datetime import timedelta
from typing import Any

from groupcal.application.ports.chat_transport import EditorPromptRequest
from groupcal.domain.entities.availability import WORKING_HOURS
from groupcal.domain.entities.view_model import Classification, DayViewModel, ViewModel, WeekViewModel

WEEK_SYMBOLS = {
    Classification.ALL_AVAILABLE: "✅",
    Classification.ALL_UNAVAILABLE: "❌",
    Classification.MIXED: "⚠️",
    Classification.NO_DATA: "📆",
    Classification.TODAY: "🔵",
}
HOUR_SYMBOLS = {
    Classification.ALL_AVAILABLE: "🟩",
    Classification.ALL_UNAVAILABLE: "🟥",
    Classification.MIXED: "🟨",
    Classification.NO_DATA: "⬜",
}

WEEK_LEGEND = "✅ Available | ❌ Unavailable | ⚠️ Mixed | 📆 No Data | 🔵 Today"
HOUR_LEGEND = "🟩 All Available | 🟥 All Unavailable | 🟨 Mixed | ⬜ No Data"
INSTRUCTIONS = (
    "Click on a day to see hourly availability\n"
    "Say \"I'm available tomorrow\" or \"Alex can't make it Friday\" to update"
)

# Discord component constants
ACTION_ROW, BUTTON, STRING_SELECT = 1, 2, 3
PRIMARY, SECONDARY, SUCCESS, DANGER = 1, 2, 3, 4
EMBED_COLOR = 0x0099FF


def hour_label(hour: int) -> str:
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}:00 {suffix}"


def calendar_message(view_model: ViewModel) -> dict[str, Any]:
    """Full message payload (embed and components) for a calendar view."""
    if isinstance(view_model, WeekViewModel):
        embed = week_embed(view_model)
    else:
        embed = day_embed(view_model)
    return {"embeds": [embed], "components": calendar_components(view_model)}


def week_embed(view_model: WeekViewModel) -> dict[str, Any]:
    week_end = view_model.week_start + timedelta(days=6)
    lines = []
    for cell in view_model.days:
        day_name = cell.day.strftime("%A")
        title = f"**{day_name} (Today)**" if cell.is_today else f"**{day_name}**"
        line = f"{WEEK_SYMBOLS[cell.display_classification]} {title}"
        counts = []
        if cell.available_count:
            counts.append(f"✅ {cell.available_count}")
        if cell.unavailable_count:
            counts.append(f"❌ {cell.unavailable_count}")
        if counts:
            line += " - " + " | ".join(counts)
        lines.append(line)
        if cell.available:
            lines.append(f"  ✅ {', '.join(cell.available)}")
        if cell.unavailable:
            lines.append(f"  ❌ {', '.join(cell.unavailable)}")
        lines.append("")

    return {
        "title": (
            f"📅 Weekly Calendar - {view_model.week_start.strftime('%b %d')} "
            f"to {week_end.strftime('%b %d, %Y')}"
        ),
        "description": "\n".join(lines),
        "color": EMBED_COLOR,
        "fields": [
            {"name": "📋 Instructions", "value": INSTRUCTIONS},
            {"name": "🗝️ Legend", "value": WEEK_LEGEND},
        ],
    }


def day_embed(view_model: DayViewModel) -> dict[str, Any]:
    lines = []
    for cell in view_model.hours:
        lines.append(f"{HOUR_SYMBOLS[cell.classification]} **{hour_label(cell.hour)}**")
        if cell.available:
            lines.append(f"  ✅ {', '.join(cell.available)}")
        if cell.unavailable:
            lines.append(f"  ❌ {', '.join(cell.unavailable)}")
        if not cell.available and not cell.unavailable:
            lines.append("  ⚪ No data")
        lines.append("")

    return {
        "title": f"📅 {view_model.anchor_date.strftime('%A, %B %d, %Y')} - Hourly Availability",
        "description": "\n".join(lines) or "No availability data for this day.",
        "color": EMBED_COLOR,
        "fields": [{"name": "🗝️ Legend", "value": HOUR_LEGEND}],
    }


def calendar_components(view_model: ViewModel) -> list[dict[str, Any]]:
    weekly = isinstance(view_model, WeekViewModel)
    unit = "week" if weekly else "day"
    rows = [
        _row(
            _button(f"prev_{unit}", "◀️ Previous Week" if weekly else "◀️ Previous Day", PRIMARY),
            _button("today", "Today", SECONDARY),
            _button(f"next_{unit}", "Next Week ▶️" if weekly else "Next Day ▶️", PRIMARY),
        )
    ]
    if weekly:
        buttons = [
            _button(f"day_select_{i}", cell.day.strftime("%a %d"), SUCCESS if cell.is_today else SECONDARY)
            for i, cell in enumerate(view_model.days)
        ]
        rows.append(_row(*buttons[:3]))
        rows.append(_row(*buttons[3:]))

    rows.append(
        _row(
            _select(
                "view_select",
                "Change View",
                [
                    _option("Weekly View", "weekly", "Show availability for the week", weekly),
                    _option("Hourly View", "hourly", "Show availability by hour", not weekly),
                ],
            )
        )
    )
    rows.append(
        _row(
            _button("edit_availability", "📝 Edit My Availability", SUCCESS),
            _button("edit_hours", "🕒 Toggle Hours", SECONDARY),
        )
    )
    return rows


def editor_message(request: EditorPromptRequest) -> dict[str, Any]:
    day = request.date.strftime("%A, %B %d")
    hour_options = [_option(hour_label(hour), str(hour)) for hour in WORKING_HOURS]
    save_row = _row(
        _button("save_availability", "💾 Save", SUCCESS),
        _button("cancel_edit", "❌ Cancel", DANGER),
    )

    if request.variant == "toggle":
        projection = request.current_projection
        return {
            "content": (
                f"Toggle your hours for {day}:\n"
                f"✅ {', '.join(hour_label(h) for h in sorted(projection.available)) or 'none'}\n"
                f"❌ {', '.join(hour_label(h) for h in sorted(projection.unavailable)) or 'none'}"
            ),
            "components": [
                _row(_select("toggle_available", "Toggle available hours", hour_options, multiple=True)),
                _row(_select("toggle_unavailable", "Toggle unavailable hours", hour_options, multiple=True)),
                save_row,
            ],
        }

    return {
        "content": f"Edit your availability for {day}:",
        "components": [
            _row(_select("select_start_time", "Select start time", hour_options)),
            _row(_select("select_end_time", "Select end time", hour_options)),
            _row(
                _select(
                    "select_status",
                    "Select availability status",
                    [
                        _option("✅ Available", "available", "I can attend during this time"),
                        _option("❌ Unavailable", "unavailable", "I cannot attend during this time"),
                    ],
                )
            ),
            save_row,
        ],
    }


def _row(*components: dict[str, Any]) -> dict[str, Any]:
    return {"type": ACTION_ROW, "components": list(components)}


def _button(custom_id: str, label: str, style: int) -> dict[str, Any]:
    return {"type": BUTTON, "custom_id": custom_id, "label": label, "style": style}


def _select(
    custom_id: str, placeholder: str, options: list[dict[str, Any]], multiple: bool = False
) -> dict[str, Any]:
    select = {"type": STRING_SELECT, "custom_id": custom_id, "placeholder": placeholder, "options": options}
    if multiple:
        select["min_values"] = 1
        select["max_values"] = len(options)
    return select


def _option(label: str, value: str, description: str | None = None, default: bool = False) -> dict[str, Any]:
    option: dict[str, Any] = {"label": label, "value": value}
    if description:
        option["description"] = description
    if default:
        option["default"] = True
    return option
