"""Template interpolation and deterministic phrasing variation.

Generated pages that share a category would otherwise end up with
byte-identical titles and descriptions.  Each template family therefore has
several phrasings, and :func:`select_variation` picks one per page from a
stable string hash of the page's slug.  The hash is the classic
``h = h * 31 + c`` polynomial truncated to a signed 32-bit integer, so the
same slug always lands on the same variant, build after build.

Placeholders use ``{{name}}`` syntax.  A placeholder that cannot be resolved
is left in place verbatim; interpolation never raises.
"""

import re
from typing import Dict, List, Sequence, Tuple, TypeVar

from app.models.generation import DistanceSpec, RaceData, TimeGoal
from app.models.page import (
    CallToAction,
    ContentTemplate,
    ContentVariables,
    FaqItem,
    HowTo,
    HowToStep,
    PageCategory,
    PageDescriptor,
)
from app.services.normalizer import generate_page_id

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")

# Placeholder name (snake_case field or camelCase alias) -> model field
_FIELD_LOOKUP: Dict[str, str] = {}
for _name, _info in ContentVariables.model_fields.items():
    if _name == "custom":
        continue
    _FIELD_LOOKUP[_name] = _name
    if _info.alias:
        _FIELD_LOOKUP[_info.alias] = _name

_KM_PER_MILE = 1.60934


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------

def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def interpolate(template: str, variables: ContentVariables) -> str:
    """Replace every ``{{name}}`` in *template* with its value from *variables*.

    Named fields are checked first, then the ``custom`` extension map.
    Unknown or unset names are left untouched.
    """

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        field = _FIELD_LOOKUP.get(key)
        if field is not None:
            value = getattr(variables, field)
            if value is not None:
                return _format_value(value)
        if key in variables.custom:
            return _format_value(variables.custom[key])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, template)


def interpolate_template(template: ContentTemplate, variables: ContentVariables) -> ContentTemplate:
    """Interpolate every field of a :class:`ContentTemplate`."""
    return ContentTemplate(
        title=interpolate(template.title, variables),
        description=interpolate(template.description, variables),
        h1=interpolate(template.h1, variables),
        intro=interpolate(template.intro, variables),
        bullets=[interpolate(b, variables) for b in template.bullets],
    )


# ---------------------------------------------------------------------------
# Variation selection
# ---------------------------------------------------------------------------

def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def string_hash(key: str) -> int:
    """Signed 32-bit polynomial hash over the UTF-16 code units of *key*."""
    encoded = key.encode("utf-16-le")
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32(h * 31 + unit)
    return h


def select_variation(variations: Sequence[T], key: str) -> T:
    """Pick one of *variations* for *key*, deterministically.

    Raises:
        ValueError: if *variations* is empty.
    """
    if not variations:
        raise ValueError("select_variation() needs at least one variant.")
    return variations[abs(string_hash(key)) % len(variations)]


# ---------------------------------------------------------------------------
# Variation tables
# ---------------------------------------------------------------------------

TITLE_VARIATIONS: Dict[PageCategory, List[str]] = {
    PageCategory.PACE: [
        "{{name}} Calculator - Training Paces + Pace Chart | TrainPace",
        "{{name}} Pace Calculator - VDOT Training Zones | TrainPace",
        "Free {{name}} Calculator - Easy to Interval Paces | TrainPace",
        "{{name}} Training Pace Calculator (Free) | TrainPace",
    ],
    PageCategory.FUEL: [
        "{{name}} Fueling Plan - Gels, Carbs & Timing | TrainPace",
        "{{name}} Fuel Calculator - How Many Gels? | TrainPace",
        "Free {{name}} Fueling Guide - Carbs/Hour | TrainPace",
        "{{name}} Nutrition Plan - Gel Schedule | TrainPace",
    ],
    PageCategory.RACE: [
        "{{name}} - Pace, Fueling & Course Strategy | TrainPace",
        "{{name}} Race Prep - Training Paces & Tips | TrainPace",
        "{{name}} Guide - Pacing, Fueling, Elevation | TrainPace",
        "Prepare for {{name}} - Free Race Tools | TrainPace",
    ],
    PageCategory.ELEVATION: [
        "{{name}} - Elevation Profile & Route Analysis | TrainPace",
        "{{name}} - Free GPX Analyzer | TrainPace",
        "{{name}} - Hills, Grades & Climb Stats | TrainPace",
        "{{name}} Guide - Elevation Analysis | TrainPace",
    ],
    PageCategory.BLOG: [
        "{{name}} - Running Tips & Training Guide | TrainPace",
        "{{name}}: What Runners Need to Know | TrainPace",
        "{{name}} Explained - TrainPace Blog",
    ],
}

DESCRIPTION_VARIATIONS: Dict[PageCategory, List[str]] = {
    PageCategory.PACE: [
        "Free {{name}} pace calculator. Enter your {{distance}} time to get VDOT-based Easy, "
        "Tempo, Threshold, and Interval training paces.",
        "Calculate your {{name}} training paces. Convert your race time into Easy, Tempo, "
        "Threshold, and Interval zones using VDOT methodology.",
        "{{name}} calculator for runners. Use your {{distance}} time to generate personalized "
        "training paces for all your workouts.",
    ],
    PageCategory.FUEL: [
        "Build your {{name}} fueling plan. Calculate carbs per hour, gel count, and timing "
        "schedule to avoid hitting the wall.",
        "{{name}} nutrition guide. Estimate how many gels you need and when to take them for "
        "optimal race-day fueling.",
        "Free {{name}} fuel calculator. Get a personalized carb target and gel schedule based "
        "on your finish time.",
    ],
    PageCategory.RACE: [
        "{{name}} race prep: set training paces, build a fueling plan, and analyze the course "
        "elevation. Free tools for self-coached runners.",
        "Prepare for {{name}} with TrainPace. Get pacing targets, fueling guidance, and course "
        "strategy in one place.",
        "{{name}} preparation guide. Use free calculators for pacing, nutrition, and elevation "
        "analysis.",
    ],
    PageCategory.ELEVATION: [
        "Analyze the {{name}} elevation profile. See total gain, steepest grades, and key climbs "
        "so you can pace the hills with confidence.",
        "Free {{name}} elevation analyzer. Upload a GPX file to map every climb and descent "
        "before race day.",
        "{{name}} course elevation breakdown: gain, loss, and grade by section to plan an even "
        "effort.",
    ],
    PageCategory.BLOG: [
        "{{name}}: practical running advice on pacing, fueling, and training from TrainPace.",
        "Learn about {{name}} with clear, evidence-based tips for self-coached runners.",
        "{{name}} guide for runners. Training tips, race strategy, and tools to put them into "
        "practice.",
    ],
}

INTRO_VARIATIONS: Dict[PageCategory, List[str]] = {
    PageCategory.PACE: [
        "Use a recent {{name}} result to generate science-backed training paces for easy runs, "
        "tempo efforts, thresholds, and intervals.",
        "Your {{name}} time is a great predictor of fitness. Convert it into training paces you "
        "can use for every workout.",
        "Enter your {{name}} finish time to get personalized training zones based on VDOT "
        "methodology.",
    ],
    PageCategory.FUEL: [
        "Calculate how many gels you need for your {{name}} and build a simple timing schedule "
        "to stay fueled.",
        "Use your {{name}} goal time to estimate carbs per hour, gel count, and race-day timing.",
        "Build a {{name}} fueling plan that keeps energy steady and helps you avoid hitting the "
        "wall.",
    ],
    PageCategory.RACE: [
        "Use TrainPace to plan a simple, repeatable strategy for {{name}}: pacing targets, "
        "fueling basics, and course awareness.",
        "Prepare for {{name}} with free tools for pacing, fueling, and elevation analysis.",
    ],
    PageCategory.ELEVATION: [
        "Analyze the elevation profile and grades for {{name}} to plan your pacing strategy.",
        "Upload a GPX to see elevation gain, grades, and key climbs for {{name}}.",
    ],
    PageCategory.BLOG: [
        "Learn more about {{name}} with expert tips and training guidance.",
    ],
}

BULLET_VARIATIONS: Dict[PageCategory, List[List[str]]] = {
    PageCategory.PACE: [
        [
            "VDOT-style training zones from your {{name}} time",
            "Easy, Tempo, Threshold, Interval, Long Run paces",
            "Works in min/km or min/mile",
        ],
        [
            "Personalized training paces from your {{name}}",
            "Easy pace for recovery, Tempo for threshold development",
            "Interval targets for speed work",
        ],
        [
            "Convert {{name}} time to training zones",
            "Get Easy, Tempo, Threshold, and Interval paces",
            "Print or save your pace chart",
        ],
    ],
    PageCategory.FUEL: [
        [
            "Carbs/hour target + total carbs for {{name}}",
            "Gel count estimate based on your finish time",
            "Simple race-day timing guidance",
        ],
        [
            "Calculate gels needed for your {{name}}",
            "Build a timing schedule that works",
            "Adjust for your products and preferences",
        ],
    ],
    PageCategory.RACE: [
        [
            "Pace calculator: training zones + race pace",
            "Fuel planner: carbs/hour + gel timing",
            "Elevation analysis: hills, grades, and difficulty",
        ],
    ],
    PageCategory.ELEVATION: [
        [
            "Interactive elevation profile and map",
            "Total gain/loss and grade breakdown",
            "Identify key climbs and descents",
        ],
    ],
    PageCategory.BLOG: [
        [
            "Expert training tips",
            "Science-backed advice",
            "Practical race-day strategies",
        ],
    ],
}

CTAS: Dict[PageCategory, CallToAction] = {
    PageCategory.PACE: CallToAction(href="/calculator", label="Open the Pace Calculator"),
    PageCategory.FUEL: CallToAction(href="/fuel", label="Open the Fuel Planner"),
    PageCategory.RACE: CallToAction(href="/calculator", label="Start With Pacing"),
    PageCategory.ELEVATION: CallToAction(href="/elevationfinder", label="Open Elevation Finder"),
    PageCategory.BLOG: CallToAction(href="/blog", label="Read More Articles"),
}

FAQ_TEMPLATES: Dict[str, List[FaqItem]] = {
    "pace_general": [
        FaqItem(
            question="How often should I update my training paces?",
            answer="Update your training paces after any meaningful PR or when fitness changes "
            "significantly - typically every 4-8 weeks during a training block.",
        ),
        FaqItem(
            question="Should easy pace feel slow?",
            answer="Yes. Easy pace should feel conversational and relaxed. It builds aerobic "
            "fitness and allows recovery so you can hit your harder workouts.",
        ),
        FaqItem(
            question="What if I can't hit my tempo pace?",
            answer="If tempo pace feels impossible, your training paces may be based on an "
            "outdated race result. Re-calculate using a recent effort, or adjust training to "
            "build fitness.",
        ),
    ],
    "pace_5k": [
        FaqItem(
            question="What is a good 5K pace?",
            answer='A "good" 5K pace depends on experience and age. The useful thing is '
            "consistency: use your current 5K time to set training paces you can repeat week "
            "after week.",
        ),
        FaqItem(
            question="How do I pace a 5K race?",
            answer="Start controlled (not too fast), settle into your goal pace by kilometer 1, "
            "and save energy for a strong finish. Negative splits are ideal but not required.",
        ),
    ],
    "pace_marathon": [
        FaqItem(
            question="How do I pace a marathon evenly?",
            answer="Start slightly conservative, settle into goal effort, and avoid surges early. "
            "If the course is hilly, adjust effort (not pace) on climbs.",
        ),
        FaqItem(
            question="Can a shorter race predict marathon pace?",
            answer="Yes. 10K and half marathon times are useful predictors, especially when "
            "combined with consistent long-run training.",
        ),
    ],
    "fuel_general": [
        FaqItem(
            question="How many carbs per hour should I target?",
            answer="Most runners do well with 60-90g/hour. Start lower and increase gradually "
            "based on gut tolerance. Practice in training.",
        ),
        FaqItem(
            question="When should I take my first gel?",
            answer="Many runners start early (around 20-30 minutes) to stay ahead of energy "
            "needs, then follow a steady schedule.",
        ),
    ],
    "fuel_marathon": [
        FaqItem(
            question="How many gels for a marathon?",
            answer="It depends on your finish time and carb target. A 4-hour marathon at "
            "60g/hour needs about 240g total carbs - roughly 8-10 standard gels.",
        ),
        FaqItem(
            question="Is the wall only about fueling?",
            answer="No. Pacing and conditioning matter a lot. But fueling is the most "
            "controllable lever on race day.",
        ),
    ],
}

HOW_TO_TEMPLATES: Dict[PageCategory, HowTo] = {
    PageCategory.PACE: HowTo(
        name="How to calculate your {{name}} training paces",
        description="Enter your {{name}} distance and finish time to get personalized training zones.",
        total_time="PT1M",
        tool="TrainPace Pace Calculator",
        steps=[
            HowToStep(name="Enter {{name}} distance", text="Set the distance to {{distance}}."),
            HowToStep(name="Enter your finish time", text="Type your most recent {{name}} time (HH:MM:SS)."),
            HowToStep(name="Calculate training zones", text="Generate Easy, Tempo, Threshold, and Interval paces."),
        ],
    ),
    PageCategory.FUEL: HowTo(
        name="How to build your {{name}} fueling plan",
        description="Enter your {{name}} finish time and preferences to get a gel count and schedule.",
        total_time="PT2M",
        tool="TrainPace Fuel Planner",
        steps=[
            HowToStep(name="Enter finish time", text="Use your realistic goal time for the {{name}}."),
            HowToStep(name="Set carb target", text="Choose a carbs/hour target (60-90g/hr recommended)."),
            HowToStep(name="Generate the plan", text="Get gel count, timing schedule, and total carbs needed."),
        ],
    ),
    PageCategory.RACE: HowTo(
        name="How to prepare for {{name}}",
        description="Plan pacing, fueling, and course strategy for {{name}}.",
        total_time="PT5M",
        tool="TrainPace",
        steps=[
            HowToStep(name="Pick a realistic goal time", text="Use a recent race result or time trial."),
            HowToStep(name="Set training paces", text="Calculate easy, tempo, threshold, and interval paces."),
            HowToStep(name="Build a fueling plan", text="Estimate carbs/hour and gel timing."),
            HowToStep(name="Review course elevation", text="Upload a GPX to spot key climbs and plan pacing."),
        ],
    ),
    PageCategory.ELEVATION: HowTo(
        name="How to analyze {{name}} elevation",
        description="Upload a GPX file to see elevation profile, grades, and key climbs.",
        total_time="PT2M",
        tool="TrainPace Elevation Finder",
        steps=[
            HowToStep(name="Export GPX", text="Download your GPX from Strava, Garmin, or your device."),
            HowToStep(name="Upload file", text="Drop the GPX into Elevation Finder."),
            HowToStep(name="Review climbs", text="Use the profile to spot key hills and plan pacing."),
        ],
    ),
    PageCategory.BLOG: HowTo(
        name="How to use this guide",
        description="Learn the key concepts and apply them to your training.",
        steps=[
            HowToStep(name="Read the guide", text="Understand the main concepts."),
            HowToStep(name="Apply to training", text="Use the tips in your next workout or race."),
        ],
    ),
}

_DISTANCE_HEADINGS: Dict[PageCategory, str] = {
    PageCategory.PACE: "Pace Calculator",
    PageCategory.FUEL: "Fueling Plan",
    PageCategory.ELEVATION: "Elevation Profile",
    PageCategory.RACE: "Race Prep",
    PageCategory.BLOG: "Training Guide",
}


# ---------------------------------------------------------------------------
# Content generators
# ---------------------------------------------------------------------------

def generate_intro(category: PageCategory, variables: ContentVariables) -> str:
    template = select_variation(INTRO_VARIATIONS[category], variables.slug)
    return interpolate(template, variables)


def generate_bullets(category: PageCategory, variables: ContentVariables) -> List[str]:
    bullet_set = select_variation(BULLET_VARIATIONS[category], variables.slug)
    return [interpolate(b, variables) for b in bullet_set]


def generate_cta(category: PageCategory) -> CallToAction:
    return CTAS[category]


def generate_faqs(
    category: PageCategory,
    variables: ContentVariables,
    max_items: int = 3,
) -> List[FaqItem]:
    """Two general FAQs for *category* plus one matching the distance, if any."""
    faqs: List[FaqItem] = list(FAQ_TEMPLATES.get(f"{category.value}_general", [])[:2])

    km = variables.distance_km
    if km:
        if km <= 5:
            faqs.extend(FAQ_TEMPLATES["pace_5k"][:1])
        elif km >= 42:
            if category == PageCategory.PACE:
                faqs.extend(FAQ_TEMPLATES["pace_marathon"][:1])
            elif category == PageCategory.FUEL:
                faqs.extend(FAQ_TEMPLATES["fuel_marathon"][:1])

    return [
        FaqItem(question=interpolate(f.question, variables), answer=interpolate(f.answer, variables))
        for f in faqs[:max_items]
    ]


def generate_how_to(category: PageCategory, variables: ContentVariables) -> HowTo:
    template = HOW_TO_TEMPLATES[category]
    return HowTo(
        name=interpolate(template.name, variables),
        description=interpolate(template.description, variables),
        total_time=template.total_time,
        tool=template.tool,
        steps=[
            HowToStep(name=interpolate(s.name, variables), text=interpolate(s.text, variables))
            for s in template.steps
        ],
    )


def _title_and_description(category: PageCategory, variables: ContentVariables) -> Tuple[str, str]:
    titles = TITLE_VARIATIONS[category]
    descriptions = DESCRIPTION_VARIATIONS[category]
    return (
        interpolate(select_variation(titles, variables.slug), variables),
        interpolate(select_variation(descriptions, variables.slug), variables),
    )


def _distance_path(category: PageCategory, slug: str) -> str:
    if category == PageCategory.PACE:
        return f"/calculator/{slug}-pace-calculator"
    if category == PageCategory.FUEL:
        return f"/fuel/{slug}-fueling-plan"
    return f"/{category.value}/{slug}"


def generate_distance_page(distance: DistanceSpec, category: PageCategory) -> PageDescriptor:
    """Build a descriptor for a race distance (e.g. "Half Marathon") in *category*."""
    variables = ContentVariables(
        slug=distance.slug,
        name=distance.name,
        display_name=distance.name,
        distance=distance.display_distance,
        distance_km=distance.km,
        distance_miles=round(distance.km / _KM_PER_MILE, 2),
    )
    title, description = _title_and_description(category, variables)
    faqs = generate_faqs(category, variables)

    return PageDescriptor(
        id=generate_page_id(category, distance.slug),
        slug=distance.slug,
        path=_distance_path(category, distance.slug),
        category=category,
        title=title,
        description=description,
        h1=f"{distance.name} {_DISTANCE_HEADINGS[category]}",
        intro=generate_intro(category, variables),
        bullets=generate_bullets(category, variables),
        cta=generate_cta(category),
        initial_inputs={"distance": _format_value(distance.km)},
        variables=variables,
        faq=faqs or None,
        how_to=generate_how_to(category, variables),
    )


def generate_race_page(race: RaceData) -> PageDescriptor:
    """Build a race-guide descriptor from a lightweight race record."""
    variables = ContentVariables(
        slug=race.slug,
        name=race.name,
        display_name=race.name,
        city=race.city,
        country=race.country,
        event_name=race.name,
        event_date=race.race_date,
        race_type=race.distance,
    )
    title, description = _title_and_description(PageCategory.RACE, variables)

    return PageDescriptor(
        id=generate_page_id(PageCategory.RACE, race.slug),
        slug=race.slug,
        path=f"/race/{race.slug}",
        category=PageCategory.RACE,
        title=title,
        description=description,
        h1=f"{race.name} Race Prep",
        intro=generate_intro(PageCategory.RACE, variables),
        bullets=generate_bullets(PageCategory.RACE, variables),
        cta=generate_cta(PageCategory.RACE),
        preview_route_key=race.preview_route_key,
        variables=variables,
        how_to=generate_how_to(PageCategory.RACE, variables),
    )


_TIME_GOAL_INTROS = [
    "Running a sub-{{targetTime}} {{name}} means holding {{targetPace}} per kilometer for "
    "{{distanceKm}}km. This guide breaks the goal into weekly training you can repeat.",
    "A sub-{{targetTime}} {{name}} is built on consistent weeks at {{targetPace}}/km effort "
    "and below. Use this guide to plan quality sessions, long runs, and recovery.",
    "Chasing a sub-{{targetTime}} {{name}}? Your goal pace is {{targetPace}} per kilometer "
    "({{pacePerMile}} per mile). Here is how to train for it.",
]

_TIME_GOAL_FOCUS = {
    "beginner": "Build consistent weekly mileage and one quality session per week",
    "intermediate": "Two quality sessions per week with progressive long runs",
    "advanced": "High weekly mileage with race-specific workouts at goal pace",
    "elite": "Periodized high-volume training with doubles and precise race-pace work",
}


def generate_time_goal_page(goal: TimeGoal) -> PageDescriptor:
    """Build a blog descriptor for a finish-time goal (e.g. sub-3:30 marathon)."""
    time_slug = goal.target_time.replace(":", "-")
    slug = f"sub-{time_slug}-{goal.distance}-training-guide"
    variables = ContentVariables(
        slug=slug,
        name=goal.distance_label,
        display_name=f"Sub-{goal.target_time} {goal.distance_label}",
        distance=goal.distance_label,
        distance_km=goal.distance_km,
        target_time=goal.target_time,
        target_pace=goal.pace_per_km,
        difficulty=goal.difficulty,
        custom={"pacePerMile": goal.pace_per_mile},
    )

    return PageDescriptor(
        id=generate_page_id(PageCategory.BLOG, slug),
        slug=slug,
        path=f"/blog/{slug}",
        category=PageCategory.BLOG,
        title=interpolate("Sub-{{targetTime}} {{name}} Training Plan & Paces | TrainPace", variables),
        description=interpolate(
            "How to run a sub-{{targetTime}} {{name}}: goal pace of {{targetPace}}/km, "
            "key workouts, weekly structure, and race-day pacing advice.",
            variables,
        ),
        h1=f"Sub-{goal.target_time} {goal.distance_label} Training Guide",
        intro=interpolate(select_variation(_TIME_GOAL_INTROS, slug), variables),
        bullets=[
            interpolate("Goal pace: {{targetPace}}/km ({{pacePerMile}}/mile)", variables),
            _TIME_GOAL_FOCUS[goal.difficulty],
            "Key workouts and a sample training week",
        ],
        cta=CallToAction(href="/calculator", label="Calculate Your Training Paces"),
        initial_inputs={"distance": _format_value(goal.distance_km), "time": goal.target_time},
        variables=variables,
        how_to=generate_how_to(PageCategory.BLOG, variables),
    )
