import os

from dotenv import load_dotenv

load_dotenv()

# which LLM provider to call: "gemini" or "openai"
LLM_PROVIDER = os.getenv("EMBEDGEN_LLM_PROVIDER", "gemini").lower()
USE_MOCK_LLM = os.getenv("EMBEDGEN_USE_MOCK_LLM", "false").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("EMBEDGEN_LOG_LEVEL", "INFO").upper()

GEMINI_MODEL = "gemini-2.0-flash"
GEMINI_API_KEY_ENV = "GOOGLE_API_KEY"
OPENAI_MODEL = "gpt-4o-mini"
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"

# fixed generation config, not exposed to callers
TEMPERATURE = 0.7
TOP_P = 0.95
TOP_K = 40
MAX_OUTPUT_TOKENS = 8192
# one round trip per call, retrying is left to the user
LLM_MAX_RETRIES = 0

DEFAULT_MICROCONTROLLER_NAME = "Arduino Uno"
DEFAULT_MICROCONTROLLER = "arduino-uno"
DEFAULT_LANGUAGE = "cpp"
DEFAULT_STEPS = [
    "Analyzed your request",
    "Generated code and circuit based on requirements",
]
EMPTY_CIRCUIT = {"components": [], "connections": []}

# RAM/Flash capacity and power profile per supported board
MICROCONTROLLERS = {
    "arduino-uno": {"name": "Arduino Uno", "ram": "2KB", "flash": "32KB", "battery_powered": False},
    "arduino-mega": {"name": "Arduino Mega", "ram": "8KB", "flash": "256KB", "battery_powered": False},
    "esp32": {"name": "ESP32", "ram": "520KB", "flash": "4MB", "battery_powered": True},
    "esp8266": {"name": "ESP8266", "ram": "80KB", "flash": "4MB", "battery_powered": True},
    "stm32f4": {"name": "STM32F4", "ram": "192KB", "flash": "1MB", "battery_powered": True},
    "raspberry-pi-pico": {
        "name": "Raspberry Pi Pico",
        "ram": "264KB",
        "flash": "2MB",
        "battery_powered": True,
    },
}

LANGUAGES = {
    "c": "C",
    "cpp": "C++",
    "python": "Python",
    "javascript": "JavaScript",
    "rust": "Rust",
}

FRAMEWORKS = {
    "arduino": "Arduino",
    "esp-idf": "ESP-IDF",
    "stm32-hal": "STM32 HAL",
    "freertos": "FreeRTOS",
}

# The JSON envelope described below is what utils/normalizer.py expects back.
# Change both together.
PROJECT_GENERATION_PROMPT = """
You are an expert Arduino and electronics engineering assistant specialized in creating hardware projects.

Based on the following user request, create a complete Arduino project:

USER REQUEST: {user_prompt}

Respond with a JSON object in the following structure:
{{
  "metadata": {{
    "functionality": "Brief description of project functionality",
    "microcontroller": "Arduino model to use",
    "sensors": ["List of sensors needed"],
    "actuators": ["List of actuators/output devices needed"]
  }},
  "steps": [
    "Step 1: Detailed analysis of what you're doing",
    "Step 2: Component selection reasoning",
    "Step 3: Circuit design approach",
    "Step 4: Code structure and libraries chosen"
  ],
  "code": "Complete, functional Arduino code including all necessary libraries, proper error handling, and comments",
  "circuit": {{
    "components": [
      {{
        "id": "unique_id",
        "type": "component_type",
        "x": 100,
        "y": 100,
        "label": "Component Name"
      }}
    ],
    "connections": [
      {{
        "from": "component_id1",
        "to": "component_id2",
        "fromPin": "pin_name1",
        "toPin": "pin_name2"
      }}
    ]
  }}
}}

The code should be complete, well-commented, include appropriate error handling, and follow best practices for Arduino programming. Circuit components should follow realistic placement and connection patterns.
"""

REPROMPT_PROMPT = """
You are an expert Arduino and electronics engineering assistant working on iterative improvements to an existing hardware project.

ORIGINAL PROJECT REQUEST: {original_prompt}

CURRENT ARDUINO CODE:
```
{current_code}
```

CURRENT CIRCUIT CONFIGURATION:
{circuit_config}

CURRENT PROJECT METADATA:
{metadata}

USER'S NEW REQUEST: {user_prompt}

Analyze the existing project and the new request, then provide updates in a JSON object with the following structure:
{{
  "steps": [
    "Step 1: Analysis of the request and current implementation",
    "Step 2: Details of changes being made"
  ],
  "code": "Updated Arduino code with changes highlighted in comments",
  "circuit": {{
    "components": [
      // Only include new or modified components
    ],
    "connections": [
      // Only include new or modified connections
    ]
  }},
  "metadata": {{
    // Only include fields that need to be updated
  }}
}}

Ensure all changes are pragmatic, follow best practices, maintain compatibility with the existing project, and directly address the user's new request.
"""

MOCK_PROJECT_RESPONSE = """```json
{
  "metadata": {
    "functionality": "Blinks an LED once per second",
    "microcontroller": "Arduino Uno",
    "sensors": [],
    "actuators": ["LED"]
  },
  "steps": [
    "Step 1: Parsed request for a blinking LED",
    "Step 2: Selected the on-board Arduino Uno and a single LED",
    "Step 3: Wired the LED through a 220 Ohm resistor to pin 13",
    "Step 4: Used digitalWrite with a 1 second delay"
  ],
  "code": "const int LED_PIN = 13;\\n\\nvoid setup() {\\n  pinMode(LED_PIN, OUTPUT);\\n}\\n\\nvoid loop() {\\n  digitalWrite(LED_PIN, HIGH);\\n  delay(1000);\\n  digitalWrite(LED_PIN, LOW);\\n  delay(1000);\\n}\\n",
  "circuit": {
    "components": [
      {"id": "mcu", "type": "arduino-uno", "x": 100, "y": 100, "label": "Arduino Uno"},
      {"id": "r1", "type": "resistor", "x": 260, "y": 80, "label": "220 Ohm Resistor"},
      {"id": "led1", "type": "led", "x": 360, "y": 80, "label": "Red LED"}
    ],
    "connections": [
      {"from": "mcu", "to": "r1", "fromPin": "D13", "toPin": "1"},
      {"from": "r1", "to": "led1", "fromPin": "2", "toPin": "anode"},
      {"from": "led1", "to": "mcu", "fromPin": "cathode", "toPin": "GND"}
    ]
  }
}
```"""
