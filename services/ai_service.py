"""Chat-completion client for route optimisation and delivery-time estimates.

Every call has exactly one fallback: on any network, HTTP or parse failure
the heuristic answer is returned instead and the error is logged.
"""
import json
import httpx
from models import DeliveryPriority
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

FALLBACK_MINUTES_PER_STOP = 15
FALLBACK_KM_PER_STOP = 3.5
FALLBACK_MINUTES_PER_KM = 3
FALLBACK_CONFIDENCE = 0.75
PRIORITY_TIME_MULTIPLIERS = {
    DeliveryPriority.URGENT: 0.7,
    DeliveryPriority.HIGH: 0.8,
    DeliveryPriority.MEDIUM: 1.0,
    DeliveryPriority.LOW: 1.2,
}

class AIResponseError(Exception):
    """The completion endpoint answered, but not with what we asked for."""

def _strip_fences(content):
    content = content.strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else ""
        if content.rstrip().endswith("```"):
            content = content.rstrip()[:-3]
    return content.strip()

class AIService:
    def __init__(self, base_url, api_key, customer_id="", model="", timeout=30.0, transport=None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.customer_id = customer_id
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings, transport=None):
        return cls(
            settings.AI_API_BASE_URL,
            settings.AI_API_KEY,
            customer_id=settings.AI_CUSTOMER_ID,
            model=settings.AI_MODEL,
            timeout=settings.AI_TIMEOUT_SECONDS,
            transport=transport,
        )

    def _headers(self):
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if self.customer_id:
            headers["customerId"] = self.customer_id
        return headers

    async def complete_json(self, prompt, max_tokens):
        """Send one user prompt and parse the reply content as JSON"""
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout,
                                     transport=self.transport) as client:
            response = await client.post(
                "/chat/completions",
                headers=self._headers(),
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "max_tokens": max_tokens,
                    "temperature": 0.1,
                },
            )
            response.raise_for_status()
            payload = response.json()

        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise AIResponseError("No response from AI service")
        if not content:
            raise AIResponseError("No response from AI service")
        return json.loads(_strip_fences(content))

    async def optimize_route(self, start_location, destinations, vehicle_type="car"):
        """Suggest a visiting order for destinations.

        `destinations` is a list of dicts with lat, lng and address. The result
        carries optimizedOrder (0-based indices), estimatedTime (minutes),
        estimatedDistance (km), reasoning and whether the AI answer was used.
        """
        lines = "\n".join(
            f"{idx + 1}. {dest['address']} ({dest['lat']}, {dest['lng']})"
            for idx, dest in enumerate(destinations)
        )
        prompt = (
            "As a logistics optimization AI, analyze and optimize this delivery route:\n\n"
            f"Start Location: {start_location.lat}, {start_location.lng}\n"
            f"Vehicle Type: {vehicle_type}\n\n"
            f"Destinations:\n{lines}\n\n"
            "Please provide:\n"
            "1. Optimized delivery order (array of 0-based destination indices)\n"
            "2. Estimated total time in minutes\n"
            "3. Estimated total distance in kilometers\n"
            "4. Brief reasoning for the optimization\n\n"
            "Respond in JSON format:\n"
            '{"optimizedOrder": [array of indices], "estimatedTime": number, '
            '"estimatedDistance": number, "reasoning": "string"}'
        )
        try:
            result = await self.complete_json(prompt, max_tokens=1000)
            order = list(result["optimizedOrder"])
            if any(isinstance(i, bool) or not isinstance(i, int) for i in order):
                raise AIResponseError(f"optimizedOrder must hold integer indices: {order}")
            if sorted(order) != list(range(len(destinations))):
                raise AIResponseError(f"optimizedOrder is not a permutation: {order}")
            return {
                "optimizedOrder": order,
                "estimatedTime": float(result["estimatedTime"]),
                "estimatedDistance": float(result["estimatedDistance"]),
                "reasoning": str(result.get("reasoning", "")),
                "optimized": True,
            }
        except Exception as e:
            logger.error(f"Route optimization failed: {str(e)}")
            return fallback_route(len(destinations))

    async def calculate_delivery_time(self, distance, traffic_factor=1.0, weather_factor=1.0,
                                      priority=DeliveryPriority.MEDIUM):
        priority = DeliveryPriority(priority)
        prompt = (
            "Calculate delivery time estimation:\n"
            f"- Distance: {distance} km\n"
            f"- Traffic Factor: {traffic_factor} (1.0 = normal, 1.5 = heavy traffic)\n"
            f"- Weather Factor: {weather_factor} (1.0 = normal, 1.3 = adverse weather)\n"
            f"- Package Priority: {priority.value}\n\n"
            "Provide time estimation in minutes with confidence level and key factors.\n\n"
            "Respond in JSON format:\n"
            '{"estimatedTime": number, "confidence": number (0-1), '
            '"factors": ["list of key factors affecting delivery time"]}'
        )
        try:
            result = await self.complete_json(prompt, max_tokens=500)
            confidence = float(result["confidence"])
            if not 0 <= confidence <= 1:
                raise AIResponseError(f"confidence out of range: {confidence}")
            return {
                "estimatedTime": float(result["estimatedTime"]),
                "confidence": confidence,
                "factors": [str(f) for f in result.get("factors", [])],
            }
        except Exception as e:
            logger.error(f"Delivery time calculation failed: {str(e)}")
            return fallback_delivery_time(distance, traffic_factor, weather_factor, priority)

def fallback_route(stop_count):
    return {
        "optimizedOrder": list(range(stop_count)),
        "estimatedTime": float(stop_count * FALLBACK_MINUTES_PER_STOP),
        "estimatedDistance": stop_count * FALLBACK_KM_PER_STOP,
        "reasoning": "Fallback optimization: Sequential order based on input sequence",
        "optimized": False,
    }

def fallback_delivery_time(distance, traffic_factor=1.0, weather_factor=1.0,
                           priority=DeliveryPriority.MEDIUM):
    base_time = distance * FALLBACK_MINUTES_PER_KM
    adjusted = base_time * traffic_factor * weather_factor
    return {
        "estimatedTime": float(round(adjusted * PRIORITY_TIME_MULTIPLIERS[DeliveryPriority(priority)])),
        "confidence": FALLBACK_CONFIDENCE,
        "factors": ["Distance", "Traffic conditions", "Weather", "Package priority"],
    }
