"""
Ledger services.

The recorder, evaluator and recalculator share the persistence operations
in ``store``; pot balances are only changed through those operations.
"""

from .exceptions import (
    LedgerServiceError,
    InvalidWorkoutError,
    UserNotFoundError,
    PairNotFoundError,
    SettlementConflictError,
    PotContentionError,
)
from .recorder import (
    WorkoutRecord,
    calculate_pot_delta,
    parse_workout_date,
    record_workout,
    get_workout_for_day,
    get_workout_history,
)
from .evaluator import (
    WeekOutcome,
    WeekEvaluation,
    determine_outcome,
    settle_pair_week,
    evaluate_pair_week,
    evaluate_pair,
    evaluate_weeks,
    evaluate_all_pairs,
)
from .recalculator import (
    PotRecalculation,
    get_reference_date,
    calculate_pot_balance,
    recalculate_pot,
    recalculate_user_pots,
)

__all__ = [
    # Exceptions
    'LedgerServiceError',
    'InvalidWorkoutError',
    'UserNotFoundError',
    'PairNotFoundError',
    'SettlementConflictError',
    'PotContentionError',
    # Recorder
    'WorkoutRecord',
    'calculate_pot_delta',
    'parse_workout_date',
    'record_workout',
    'get_workout_for_day',
    'get_workout_history',
    # Evaluator
    'WeekOutcome',
    'WeekEvaluation',
    'determine_outcome',
    'settle_pair_week',
    'evaluate_pair_week',
    'evaluate_pair',
    'evaluate_weeks',
    'evaluate_all_pairs',
    # Recalculator
    'PotRecalculation',
    'get_reference_date',
    'calculate_pot_balance',
    'recalculate_pot',
    'recalculate_user_pots',
]
