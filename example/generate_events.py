import json
import random
import uuid
from datetime import datetime, timedelta, timezone


def generate_events(num_events: int, num_users: int = 50):
    base_time = datetime.now(timezone.utc)
    event_names = [
        "pageview", "click", "scroll", "signup", "add_to_cart", "purchase", "logout"
    ]
    user_ids = [str(uuid.uuid4()) for _ in range(num_users)]

    events = []
    for _ in range(num_events):
        event = {
            "userId": random.choice(user_ids),
            "event": random.choice(event_names),
            "timestamp": (base_time - timedelta(seconds=random.randint(0, 3600 * 24 * 30))).isoformat(),
        }
        events.append(event)
    return events


def main():
    data = generate_events(1000)
    with open("events.json", "w") as f:
        json.dump(data, f, indent=2)


if __name__ == "__main__":
    main()
