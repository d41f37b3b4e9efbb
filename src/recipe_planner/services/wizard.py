"""Step machine for the meal-plan wizard."""

from dataclasses import dataclass, replace

from recipe_planner.domain.errors import ValidationError
from recipe_planner.domain.meal_plans import MIN_PLAN_DAYS
from recipe_planner.domain.wizard import WizardDraft

STEP_DAYS = "days"
STEP_RECIPES = "recipes"
STEP_SIDES = "sides"
STEP_REVIEW = "review"
STEPS = (STEP_DAYS, STEP_RECIPES, STEP_SIDES, STEP_REVIEW)


@dataclass(frozen=True)
class WizardState:
    """The current step together with the draft being built."""

    step: str
    draft: WizardDraft

    @property
    def prev_step(self) -> str | None:
        index = STEPS.index(self.step)
        return STEPS[index - 1] if index > 0 else None

    @property
    def next_step(self) -> str | None:
        index = STEPS.index(self.step)
        return STEPS[index + 1] if index < len(STEPS) - 1 else None

    @property
    def can_advance(self) -> bool:
        return self.next_step is not None and step_error(self.step, self.draft) is None


def start(draft: WizardDraft) -> WizardState:
    """Return the initial wizard state for a draft."""
    return WizardState(step=STEP_DAYS, draft=draft)


def at_step(step: str, draft: WizardDraft) -> WizardState:
    """Return the state for a named step, rejecting unknown step names."""
    if step not in STEPS:
        raise ValidationError(f"Unknown wizard step: {step}")
    return WizardState(step=step, draft=draft)


def step_error(step: str, draft: WizardDraft) -> str | None:
    """Return why the draft cannot leave ``step``, or None when it can."""
    if step == STEP_DAYS:
        if draft.start_date is None:
            return "Pick a start date"
        if draft.num_days < MIN_PLAN_DAYS:
            return "Pick at least one day"
    if step == STEP_RECIPES and not draft.recipe_ids:
        return "Select at least one recipe"
    return None


def advance(state: WizardState) -> WizardState:
    """Move one step forward when the current step's gate passes.

    Raises ValidationError (and leaves ``state`` untouched) otherwise.
    """
    if state.next_step is None:
        raise ValidationError("The review step is the last step")
    error = step_error(state.step, state.draft)
    if error is not None:
        raise ValidationError(error)
    return replace(state, step=state.next_step)


def back(state: WizardState) -> WizardState:
    """Move one step backward; a no-op on the first step."""
    if state.prev_step is None:
        return state
    return replace(state, step=state.prev_step)


def ensure_complete(draft: WizardDraft) -> None:
    """Raise ValidationError unless the draft passes every gate before review."""
    for step in STEPS[:-1]:
        error = step_error(step, draft)
        if error is not None:
            raise ValidationError(error)
