"""Encounter, food consumption and payoff constants."""

# Collision geometry
COLLISION_RADIUS = 15.0
FOOD_SIZE = 5.0
FOOD_VALUE = 25.0  # Energy gained per food item

# Agent-agent encounters
INTERACTION_COOLDOWN = 60  # Ticks before the same pair can interact again
KNOCKBACK_FORCE = 300.0
FIGHT_COST = 10.0  # Surcharge paid by whoever chooses FIGHT
FIGHT_AFFORD_MULTIPLIER = 1.5  # Energy must exceed fight cost by this factor
COOPERATIVE_HUNGRY_ENERGY = 60.0
COOPERATIVE_FIGHT_CHANCE = 0.3
PASSIVE_FLEE_AGGRESSION = 0.6

# Presentation events kept per tick
MAX_RECENT_EVENTS = 50

# Payoff matrix (Hawk-Dove): [first action outcome, second action outcome]
PAYOFF = {
    "FIGHT_FIGHT": (-20.0, -20.0),  # Both injured
    "FIGHT_SHARE": (30.0, -10.0),  # Fighter wins, sharer loses
    "FIGHT_FLEE": (10.0, 0.0),  # Fighter claims, fleer escapes
    "SHARE_SHARE": (15.0, 15.0),  # Both share peacefully
    "SHARE_FLEE": (5.0, 0.0),  # Sharer gets little, fleer safe
    "FLEE_FLEE": (0.0, 0.0),  # Nothing happens
}
