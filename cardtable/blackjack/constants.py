"""Blackjack table constants."""

# A hand over this total is bust
BLACKJACK_LIMIT = 21

# Value lost when an Ace is counted as 1 instead of 11
ACE_ADJUSTMENT = 10

# Dealer draws while below this total (hard 17, no soft-17 hit)
DEALER_STAND_VALUE = 17

# One split at most, so a player never holds more than two hands
MAX_HANDS_PER_PLAYER = 2

# Doubling and splitting both require covering twice the hand's bet
STAKE_COVERAGE_MULTIPLIER = 2
