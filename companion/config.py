# Companion Configuration
COMPANION_NAME = "Sophie"
STATE_KEY = "sophie"

# App Configuration
APP_NAME = "companion"
DB_DIR_NAME = "companion"
DB_FILENAME = "companion.db"

# Model Configuration
MODEL_NAME = "gemini-2.0-flash"
LLM_TIMEOUT_SECONDS = 30.0
THINKING_MAX_TOKENS = 300
THINKING_TEMPERATURE = 0.9
SPEECH_MAX_TOKENS = 200
SPEECH_TEMPERATURE = 0.9
PROMPT_RECENT_MEMORIES = 5  # Log entries included in each prompt

# Physiological Model (all drives live in [0, 100])
DEFAULT_ENERGY = 80.0
DEFAULT_HUNGER = 20.0
DEFAULT_SLEEPINESS = 10.0
SLEEP_ENERGY_GAIN = 2.0  # Per tick while asleep
SLEEP_SLEEPINESS_DROP = 3.0  # Per tick while asleep
AWAKE_ENERGY_COST = 0.5  # Per tick while awake
AWAKE_SLEEPINESS_GAIN = 0.2  # Per tick while awake
HUNGER_PER_TICK = 0.3
FEED_HUNGER_DROP = 30.0
NEEDS_REST_ENERGY = 30.0  # Below this energy the agent needs rest
NEEDS_REST_SLEEPINESS = 80.0  # Above this sleepiness the agent needs rest
HUNGRY_THRESHOLD = 70.0

# Relationship Model (all affinities live in [0, 100])
DEFAULT_TRUST = 10.0
DEFAULT_INTIMACY = 5.0
DEFAULT_UNDERSTANDING = 0.0
POSITIVE_TRUST_GAIN = 0.5
POSITIVE_INTIMACY_GAIN = 0.8
CONVERSATION_UNDERSTANDING_GAIN = 1.0
CONVERSATION_INTIMACY_GAIN = 0.3
NEGLECT_TRUST_LOSS = 0.1
NEGLECT_INTIMACY_LOSS = 0.2
APPROACH_TRUST = 30.0
SLOW_BLINK_TRUST = 50.0
SHOW_BELLY_TRUST = 70.0

# Agent State
FALL_ASLEEP_SLEEPINESS = 80.0  # Awake agent above this falls asleep
WAKE_UP_SLEEPINESS = 5.0  # Sleeping agent below this wakes up
INTERACTION_WINDOW_SECONDS = 600  # Short-window interaction counter lifetime
RECENT_INTERACTION_MINUTES = 2  # Interactions newer than this count as "now"
NEGLECT_MINUTES = 180  # Relationship decays past this silence
WAKE_AFTER_INTERACTIONS = 1  # Count above which a sleeping agent wakes
IRRITATED_AFTER_INTERACTIONS = 3  # Count above which a woken agent is irritated

# Behavior Oracle
SLEEP_BEHAVIOR_SLEEPINESS = 70.0
SIT_BEHAVIOR_ENERGY = 20.0
WALK_BEHAVIOR_HUNGER = 85.0
HAPPY_APPROACH_INTIMACY = 50.0
TWILIGHT_WALK_ENERGY = 60.0
TWILIGHT_HOURS = ((5, 8), (17, 20))  # Half-open [start, end) local hours

# Background Scheduler Configuration
BACKGROUND_TICK_ENABLED = True
CYCLE_INTERVAL_SECONDS = 10.0  # Real seconds between scheduler cycles
TICK_EVERY_CYCLES = 3  # Agent tick cadence
PERSIST_EVERY_CYCLES = 6  # Snapshot persistence cadence
THINKING_EVERY_CYCLES = 180  # Autonomous LLM thinking cadence
RULE_THOUGHT_EVERY_CYCLES = 7  # Rule-based thought bubble cadence

# Events
MAX_PENDING_EVENTS = 100  # Oldest undelivered events are dropped past this
MAX_MEMORY_QUERY = 100
