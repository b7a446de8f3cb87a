"""Hand-authored descriptors and the domain records fed to the generators."""

from typing import List

from app.models.generation import DistanceSpec, TimeGoal
from app.models.page import CallToAction, FaqItem, HowTo, HowToStep, PageCategory, PageDescriptor
from app.services.normalizer import generate_page_id

_PACE_CTA = CallToAction(href="/calculator", label="Open the Pace Calculator")
_FUEL_CTA = CallToAction(href="/fuel", label="Open the Fuel Planner")


def _pace(slug: str, **fields) -> PageDescriptor:
    return PageDescriptor(
        id=generate_page_id(PageCategory.PACE, slug),
        slug=slug,
        path=f"/calculator/{slug}",
        category=PageCategory.PACE,
        **fields,
    )


def _fuel(slug: str, **fields) -> PageDescriptor:
    return PageDescriptor(
        id=generate_page_id(PageCategory.FUEL, slug),
        slug=slug,
        path=f"/fuel/{slug}",
        category=PageCategory.FUEL,
        **fields,
    )


def _elevation_guide(slug: str, **fields) -> PageDescriptor:
    return PageDescriptor(
        id=generate_page_id(PageCategory.ELEVATION, slug),
        slug=slug,
        path=f"/elevationfinder/guides/{slug}",
        category=PageCategory.ELEVATION,
        **fields,
    )


STATIC_PAGES: List[PageDescriptor] = [
    _pace(
        "5k-pace-calculator",
        title="5K Pace Calculator - Training Paces + Pace Chart | TrainPace",
        description=(
            "Free 5K pace calculator. Enter your 5K time to get VDOT-based Easy, Tempo, "
            "Threshold, and Interval training paces plus a printable pace chart."
        ),
        h1="5K Pace Calculator",
        intro=(
            "Use a recent 5K result to generate science-backed training paces for easy runs, "
            "tempo efforts, thresholds, and intervals."
        ),
        bullets=[
            "VDOT-style training zones from your 5K time",
            "Easy, Tempo, Threshold, Interval, Long Run paces",
            "Works in min/km or min/mile",
        ],
        cta=_PACE_CTA,
        initial_inputs={"distance": "5"},
        related_page_ids=["pace:10k-pace-calculator", "pace:vdot-calculator"],
        faq=[
            FaqItem(
                question="What is a good 5K pace?",
                answer='A "good" 5K pace depends on experience and age. The useful thing is '
                "consistency: use your current 5K time to set training paces you can repeat.",
            ),
            FaqItem(
                question="How often should I update my 5K training paces?",
                answer="Any time you run a meaningful PR or your fitness changes, often every "
                "4-8 weeks in a training block.",
            ),
        ],
        how_to=HowTo(
            name="How to calculate your 5K training paces",
            description="Enter your 5K distance and finish time to get personalized training zones.",
            steps=[
                HowToStep(name="Enter 5K distance", text="Set the distance to 5.0 km (or 3.1 miles)."),
                HowToStep(name="Enter your finish time", text="Type your most recent 5K time (HH:MM:SS)."),
                HowToStep(name="Calculate training zones", text="Generate Easy, Tempo, Threshold, and Interval paces."),
            ],
        ),
    ),
    _pace(
        "10k-pace-calculator",
        title="10K Pace Calculator - Training Zones (VDOT) | TrainPace",
        description=(
            "Free 10K pace calculator. Convert your 10K race time into easy, tempo, threshold, "
            "and interval training paces using VDOT-style zones."
        ),
        h1="10K Pace Calculator",
        intro=(
            "Your 10K is a great predictor for threshold fitness. Use it to set sustainable "
            "tempo and threshold paces."
        ),
        bullets=[
            "Personalized training zones from a 10K result",
            "Tempo and threshold paces you can repeat",
            "Includes interval and long-run guidance",
        ],
        cta=_PACE_CTA,
        initial_inputs={"distance": "10"},
        related_page_ids=["pace:5k-pace-calculator", "pace:half-marathon-pace-calculator"],
        faq=[
            FaqItem(
                question="Is 10K pace the same as threshold pace?",
                answer="Not exactly. 10K pace is typically faster than threshold pace, which is "
                "the effort you can hold for about an hour.",
            ),
            FaqItem(
                question="Can I use a 10K time to train for a marathon?",
                answer="Yes. A strong 10K provides a fitness anchor for training zones, then you "
                "build marathon-specific endurance with long runs.",
            ),
        ],
        how_to=HowTo(
            name="How to calculate your 10K training paces",
            description="Use your 10K finish time to calculate realistic training paces.",
            steps=[
                HowToStep(name="Select 10K distance", text="Set distance to 10.0 km (or 6.2 miles)."),
                HowToStep(name="Enter your time", text="Input your most recent 10K race result."),
                HowToStep(name="Use the zones", text="Apply the suggested paces to workouts and long runs."),
            ],
        ),
    ),
    _pace(
        "half-marathon-pace-calculator",
        title="Half Marathon Pace Calculator - Training Zones | TrainPace",
        description=(
            "Free half marathon pace calculator. Use your 13.1 finish time to estimate race pace "
            "and get training paces for easy, tempo, and threshold runs."
        ),
        h1="Half Marathon Pace Calculator",
        intro=(
            'A half marathon is one of the best "fitness benchmarks" for endurance athletes. '
            "Use it to dial in tempo work and long-run pacing."
        ),
        bullets=[
            "Half marathon pace (min/km or min/mile)",
            "Training zones for easy, tempo, threshold, intervals",
            "Great for marathon build-ups",
        ],
        cta=_PACE_CTA,
        initial_inputs={"distance": "21.0975"},
        related_page_ids=["pace:marathon-pace-calculator", "fuel:half-marathon-fueling-plan"],
        how_to=HowTo(
            name="How to calculate your half marathon paces",
            description="Enter your half marathon time to get race pace and training zones.",
            steps=[
                HowToStep(name="Choose half marathon", text="Set distance to 21.0975 km (13.1 miles)."),
                HowToStep(name="Enter your time", text="Use a recent half marathon or a realistic goal."),
                HowToStep(name="Train with the paces", text="Use easy pace for volume and tempo for quality."),
            ],
        ),
    ),
    _pace(
        "marathon-pace-calculator",
        title="Marathon Pace Calculator - Paces + Race Strategy | TrainPace",
        description=(
            "Free marathon pace calculator. Convert your marathon time to min/km or min/mile and "
            "get training paces for easy, tempo, threshold, and interval runs."
        ),
        h1="Marathon Pace Calculator",
        intro=(
            "Use your marathon time (or a recent shorter race) to set training paces and build a "
            "simple pacing strategy for race day."
        ),
        bullets=[
            "Marathon pace in min/km and min/mile",
            "Training zones that match your fitness",
            "Pairs well with course elevation and fueling planning",
        ],
        cta=_PACE_CTA,
        initial_inputs={"distance": "42.195"},
        related_page_ids=["fuel:marathon-fueling-plan", "pace:half-marathon-pace-calculator"],
        faq=[
            FaqItem(
                question="How do I pace a marathon evenly?",
                answer="Start slightly conservative, settle into goal effort, and avoid surges "
                "early. If the course is hilly, adjust effort (not pace) on climbs.",
            ),
            FaqItem(
                question="Can a 10K or half marathon predict marathon pace?",
                answer="Yes. Shorter races are useful predictors, especially when combined with "
                "consistent long-run training.",
            ),
        ],
        how_to=HowTo(
            name="How to calculate your marathon pace and training zones",
            description="Enter your marathon time to calculate goal pace and supporting paces.",
            steps=[
                HowToStep(name="Choose marathon distance", text="Set distance to 42.195 km (26.2 miles)."),
                HowToStep(name="Enter your time", text="Use a recent marathon or a realistic goal time."),
                HowToStep(name="Use zones in training", text="Build volume with easy runs and add tempo work."),
            ],
        ),
    ),
    _pace(
        "vdot-calculator",
        title="VDOT Calculator - Race Times to Training Paces | TrainPace",
        description=(
            "Free VDOT calculator. Convert any race time (5K to marathon) into VDOT-based training "
            "paces for easy runs, tempo, threshold, and intervals."
        ),
        h1="VDOT Calculator (Training Paces)",
        intro=(
            "VDOT is a practical way to translate race results into training paces. Use it to keep "
            "easy days easy and hard days appropriately hard."
        ),
        bullets=[
            "VDOT-inspired pacing guidance",
            "Works for 5K, 10K, half, marathon",
            "Useful for building workout targets",
        ],
        cta=CallToAction(href="/calculator", label="Calculate Your Training Paces"),
        related_page_ids=["pace:5k-pace-calculator"],
        faq=[
            FaqItem(
                question="What does VDOT mean?",
                answer="VDOT is a performance-based metric popularized by coach Jack Daniels. It "
                "helps runners set training paces from race results.",
            ),
            FaqItem(
                question="Do I need a lab test to use VDOT?",
                answer="No. A recent race result is enough to estimate a practical training level.",
            ),
        ],
    ),
    _fuel(
        "marathon-fueling-plan",
        title="Marathon Fueling Plan - Gels, Carbs/Hour, Timing | TrainPace",
        description=(
            "Build a marathon fueling plan in minutes. Calculate carbs per hour, total carbs, gels "
            "needed, and a simple timing schedule to avoid hitting the wall."
        ),
        h1="Marathon Fueling Plan Calculator",
        intro=(
            "Use your target finish time to estimate how many gels you need and when to take them, "
            "with realistic 60-90g/hr carb targets."
        ),
        bullets=[
            "Carbs/hour target and total carbs",
            "Gel count estimate",
            "Simple race-day timing guidance",
        ],
        cta=_FUEL_CTA,
        related_page_ids=["fuel:carbs-per-hour-running", "pace:marathon-pace-calculator"],
        faq=[
            FaqItem(
                question="How many carbs per hour for a marathon?",
                answer="Most runners do well in the 60-90g/hour range, depending on gut training, "
                "intensity, and product tolerance.",
            ),
            FaqItem(
                question="When should I take my first gel?",
                answer="Many runners start early (around 20-30 minutes) to stay ahead of energy "
                "needs, then follow a steady schedule.",
            ),
        ],
        how_to=HowTo(
            name="How to build a marathon fueling plan",
            description="Enter your marathon finish time to get a gel count and carb targets.",
            steps=[
                HowToStep(name="Enter finish time", text="Use your realistic goal time or recent result."),
                HowToStep(name="Choose race type", text="Select Marathon to apply marathon-specific guidance."),
                HowToStep(name="Generate the plan", text="Get carbs/hour, total carbs, and gels needed."),
            ],
        ),
    ),
    _fuel(
        "half-marathon-fueling-plan",
        title="Half Marathon Fueling Plan - Gels & Carb Targets | TrainPace",
        description=(
            "Plan your half marathon fueling. Estimate whether you need gels, how many carbs per "
            "hour to target, and when to take them on race day."
        ),
        h1="Half Marathon Fueling Plan",
        intro=(
            "Many half marathoners benefit from one or two gels. Use your goal time to decide how "
            "much fuel you really need and when to take it."
        ),
        bullets=[
            "Do you need gels for 13.1?",
            "Carb target based on finish time",
            "Timing that fits your race rhythm",
        ],
        cta=_FUEL_CTA,
        related_page_ids=["pace:half-marathon-pace-calculator"],
        how_to=HowTo(
            name="How to fuel a half marathon",
            description="Decide on a simple gel plan for your half marathon.",
            steps=[
                HowToStep(name="Estimate finish time", text="Use a recent race or a realistic goal."),
                HowToStep(name="Pick a carb target", text="Choose 30-60g/hr for most half marathons."),
                HowToStep(name="Set timing", text="Use a steady schedule you practiced in training."),
            ],
        ),
    ),
    _fuel(
        "carbs-per-hour-running",
        title="Carbs Per Hour for Running - Marathon & Half Guide | TrainPace",
        description=(
            "Carbs per hour running calculator. Estimate a realistic carb target for marathon or "
            "half marathon fueling (60-90g/hr) based on your finish time."
        ),
        h1="Carbs Per Hour for Running",
        intro=(
            'Carbs/hour is the simplest "fueling dial" you can turn. The right target depends on '
            "duration, intensity, and gut training."
        ),
        bullets=[
            "60-90g/hr targets (adjustable)",
            "Total carbs and gel estimate",
            "Practical, race-day friendly guidance",
        ],
        cta=CallToAction(href="/fuel", label="Calculate Carbs/Hour"),
        related_page_ids=["fuel:marathon-fueling-plan"],
        faq=[
            FaqItem(
                question="Is 90g/hr too much?",
                answer="For some runners, yes. For others with gut training and the right "
                "products it is very doable. Start lower and practice.",
            ),
            FaqItem(
                question="Does body weight change carb needs?",
                answer="Weight matters less than duration and intensity for carbs/hour. Tolerance "
                "and practice matter most.",
            ),
        ],
    ),
    _elevation_guide(
        "gpx-elevation-profile-analyzer",
        title="GPX Elevation Profile Analyzer - Free Route Viewer | TrainPace",
        description=(
            "GPX elevation profile analyzer. Upload a GPX file to view elevation gain/loss, grade, "
            "and climb difficulty with an interactive map."
        ),
        h1="GPX Elevation Profile Analyzer",
        intro=(
            "If you have a GPX file from Strava, Garmin, COROS, or your watch, you can visualize "
            "elevation gain and gradients in seconds."
        ),
        bullets=[
            "Interactive elevation profile and map",
            "Total gain/loss and grade breakdown",
            "Useful for race course and long-run planning",
        ],
        cta=CallToAction(href="/elevationfinder", label="Open ElevationFinder"),
        related_page_ids=["elevation:strava-gpx-analyzer"],
        how_to=HowTo(
            name="How to analyze a GPX elevation profile",
            description="Upload a GPX route and review elevation gain, grades, and difficult sections.",
            steps=[
                HowToStep(name="Export GPX", text="Download your GPX from Strava, Garmin Connect, or your device."),
                HowToStep(name="Upload file", text="Drop the GPX into ElevationFinder."),
                HowToStep(name="Review climbs", text="Use the profile and segment analysis to spot key hills."),
            ],
        ),
    ),
    _elevation_guide(
        "strava-gpx-analyzer",
        title="Strava GPX Analyzer - Elevation Profile + Insights | TrainPace",
        description=(
            "Strava GPX analyzer. Export your Strava route as GPX and upload to view elevation "
            "profile, total gain, and grade breakdown."
        ),
        h1="Strava GPX Analyzer",
        intro=(
            "TrainPace works with GPX exports from Strava. Export your route, then upload to get "
            "elevation gain and segment-by-segment hill insights."
        ),
        bullets=[
            "Works with Strava GPX exports",
            "Elevation profile and map",
            "Grade and climb breakdown",
        ],
        cta=CallToAction(href="/elevationfinder", label="Analyze a Strava GPX"),
        related_page_ids=["elevation:gpx-elevation-profile-analyzer"],
    ),
]

# Distances that get generated tool pages; the popular ones are hand-authored above
PACE_DISTANCES: List[DistanceSpec] = [
    DistanceSpec(name="1 Mile", slug="1-mile", km=1.609, display_distance="1 mile"),
    DistanceSpec(name="15K", slug="15k", km=15.0, display_distance="15K"),
    DistanceSpec(name="10 Mile", slug="10-mile", km=16.09, display_distance="10 miles"),
    DistanceSpec(name="50K", slug="50k", km=50.0, display_distance="50K"),
]

FUEL_DISTANCES: List[DistanceSpec] = [
    DistanceSpec(name="10K", slug="10k", km=10.0, display_distance="10K"),
    DistanceSpec(name="30K", slug="30k", km=30.0, display_distance="30K"),
    DistanceSpec(name="50K", slug="50k", km=50.0, display_distance="50K"),
]

TIME_GOALS: List[TimeGoal] = [
    TimeGoal(
        distance="5k",
        distance_label="5K",
        distance_km=5.0,
        target_time="20:00",
        pace_per_km="4:00",
        pace_per_mile="6:26",
        difficulty="intermediate",
    ),
    TimeGoal(
        distance="half-marathon",
        distance_label="Half Marathon",
        distance_km=21.0975,
        target_time="1:45",
        pace_per_km="4:58",
        pace_per_mile="8:00",
        difficulty="intermediate",
    ),
    TimeGoal(
        distance="marathon",
        distance_label="Marathon",
        distance_km=42.195,
        target_time="3:30",
        pace_per_km="4:58",
        pace_per_mile="8:01",
        difficulty="advanced",
    ),
    TimeGoal(
        distance="marathon",
        distance_label="Marathon",
        distance_km=42.195,
        target_time="4:00",
        pace_per_km="5:41",
        pace_per_mile="9:09",
        difficulty="beginner",
    ),
]
