# ui/progress.py

from typing import List, Optional

from wellness_journal.core.models import Achievement, DayBucket, Goal, ProgressSnapshot
from wellness_journal.utils.datetime_utils import format_date

MOOD_EMOJI = {5: "😊", 4: "🙂", 3: "😐", 2: "🙁", 1: "😢"}
NO_MOOD_EMOJI = "💤"


def progress_bar(percent: float, length: int = 12) -> str:
    """Text progress bar"""
    percent = max(0, min(100, int(percent)))
    done = int(length * percent // 100)
    todo = length - done
    return "🟩" * done + "⬜️" * todo + f" {percent}%"


def mood_emoji(mood: Optional[int]) -> str:
    return MOOD_EMOJI.get(mood, NO_MOOD_EMOJI)


def streak_emoji(streak: int) -> str:
    if streak >= 30:
        return "🏆"
    elif streak >= 7:
        return "🔥"
    elif streak >= 3:
        return "✨"
    else:
        return "🔹"


def format_day(bucket: DayBucket) -> str:
    mood = f"{bucket.average_mood}/5" if bucket.average_mood else "-"
    dot = "●" if bucket.has_entry else "○"
    return f"{bucket.weekday_label} {mood_emoji(bucket.average_mood)} {mood:>4} {dot}"


def format_goal(goal: Goal) -> str:
    return (
        f"{goal.title}: {goal.progress}/{goal.target}\n"
        f"  {goal.description}\n"
        f"  {progress_bar(goal.percent)}\n"
        f"  {goal.remaining} more to reach your goal"
    )


def format_achievement(achievement: Achievement) -> str:
    header = f"{achievement.icon} {achievement.title}: {achievement.description}"
    if achievement.earned:
        when = format_date(achievement.earned_at) if achievement.earned_at else "Today"
        status = f"Earned on {when}"
    elif achievement.has_progress:
        status = f"{achievement.progress}/{achievement.total} completed"
    else:
        status = "Keep going to unlock this achievement!"
    return f"{header}\n  {status}"


def format_average_mood(snapshot: ProgressSnapshot) -> str:
    return f"{snapshot.average_mood:g}" if snapshot.average_mood is not None else "-"


def format_snapshot(snapshot: ProgressSnapshot) -> str:
    lines: List[str] = [
        "Your Wellness Journey",
        "",
        f"Journal Entries: {snapshot.total_entries}",
        f"Day Streak: {snapshot.current_streak} {streak_emoji(snapshot.current_streak)}",
        f"Avg Mood: {format_average_mood(snapshot)}",
        f"Achievements: {snapshot.earned_achievements}",
        "",
        "This Week's Journey",
    ]
    lines.extend(format_day(b) for b in snapshot.day_buckets)
    lines.extend(["", "Current Goals"])
    lines.extend(format_goal(g) for g in snapshot.goals)
    lines.extend(["", "Achievements"])
    lines.extend(format_achievement(a) for a in snapshot.achievements)
    return "\n".join(lines)


def share_text(snapshot: ProgressSnapshot) -> str:
    avg = snapshot.average_mood if snapshot.average_mood is not None else 0
    return (
        "I've made amazing progress on my wellness journey! "
        f"{snapshot.total_entries} journal entries, {snapshot.current_streak} day streak, "
        f"and {avg:g}/5 average mood. 🌟"
    )
