from app.models.player import PlayerPosition, SKILL_ATTRIBUTES


class SquadValidator:
    @staticmethod
    def validate(team_players: list, starter_count: int = 11) -> dict:
        """
        Validate a roster (TeamPlayer rows in roster order).

        Rules:
        1. Exactly `starter_count` starters, all ahead of the substitutes
        2. Every starter has a slot and no slot is used twice
        3. Substitutes have no slot
        4. Every skill is within 1-100
        5. At most one captain
        """
        errors = []

        starters = [tp for tp in team_players if tp.is_starter]
        substitutes = [tp for tp in team_players if not tp.is_starter]

        if len(starters) != starter_count:
            errors.append(f"Must have exactly {starter_count} starters, got {len(starters)}")

        flags = [tp.is_starter for tp in team_players]
        if flags != sorted(flags, reverse=True):
            errors.append("Starters must come before substitutes")

        slots = [tp.formation_position for tp in starters]
        if any(slot is None for slot in slots):
            errors.append("Every starter needs a formation position")
        filled = [slot for slot in slots if slot is not None]
        if len(filled) != len(set(filled)):
            errors.append(f"Duplicate formation positions: {sorted(filled)}")

        if any(tp.formation_position is not None for tp in substitutes):
            errors.append("Substitutes cannot hold a formation position")

        for tp in team_players:
            for attr in SKILL_ATTRIBUTES:
                value = getattr(tp.player, attr)
                if value is None or not 1 <= value <= 100:
                    errors.append(f"{tp.player.name}: {attr}={value} outside 1-100")

        captain_count = sum(1 for tp in team_players if tp.player.is_captain)
        if captain_count > 1:
            errors.append(f"Max 1 captain allowed, got {captain_count}")

        def count(position):
            return sum(1 for tp in team_players if tp.position == position)

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "breakdown": {
                "goalkeepers": count(PlayerPosition.GOALKEEPER),
                "defenders": count(PlayerPosition.DEFENDER),
                "midfielders": count(PlayerPosition.MIDFIELDER),
                "attackers": count(PlayerPosition.ATTACKER),
                "starters": len(starters),
                "substitutes": len(substitutes),
            }
        }
