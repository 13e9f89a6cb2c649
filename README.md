# splitty

splitty splits shared costs within a group. You record an event with its
participants and expenses, and splitty works out:

- the total cost and the average cost per person,
- how much each person paid, how much they owed, and their balance,
- a list of transfers from debtors to creditors that settles the balances.

It uses only the Python standard library and runs on Python 3.10 and later.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Running the server

```
splitty
```

The server listens on the port given by `--port`. If you leave that out, it uses
the `PORT` environment variable. If neither is set, it uses 8080:

```
splitty --port 9000
```

The server handles requests on several threads. Press Ctrl+C to stop it.
Responses carry CORS headers for any origin, and the server answers
preflight `OPTIONS` requests itself. A browser front end can therefore call the
API directly.

### Endpoints

| Method | Path                        | Purpose                           |
|--------|-----------------------------|-----------------------------------|
| POST   | `/api/events`               | create an event (201)             |
| GET    | `/api/events`               | list all events                   |
| GET    | `/api/events/{id}`          | fetch one event                   |
| PUT    | `/api/events/{id}`          | replace an event                  |
| DELETE | `/api/events/{id}`          | delete an event (204)             |
| GET    | `/api/events/{id}/summary`  | balances and settlements          |

Error responses:

- An id that is not an integer gives 400.
- A malformed body or a missing `name` gives 400.
- An unknown event gives 404.
- An unknown path gives 404.
- A known path with the wrong method gives 405.

Error messages are plain text.

An event body looks like this:

```json
{
  "name": "Weekend trip",
  "participants": [
    {"id": 1, "name": "Alice", "email": "alice@example.com"},
    {"id": 2, "name": "Bob"}
  ],
  "expenses": [
    {
      "id": 1,
      "category": "Food",
      "totalAmount": 100,
      "payments": [{"participantId": 1, "amount": 100}],
      "sharedWith": [1, 2]
    }
  ]
}
```

Rules for an event:

- `name` is required.
- An event created with `id` missing or 0 gets the next free id.
- On `PUT`, the id in the path replaces any id in the body.
- An expense with a `totalAmount` of 0 uses the sum of its payments instead.
- Each expense is divided equally among the participants listed in `sharedWith`.

All amounts are rounded to two decimals, with halves rounded away from zero.
Balances within 0.02 of zero count as settled.

## Using it as a library

```python
from splitty.models import event_from_dict
from splitty.expense_service import ExpenseService

event = event_from_dict({
    "name": "Trip",
    "participants": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}],
    "expenses": [{
        "id": 1, "category": "Food", "totalAmount": 100,
        "payments": [{"participantId": 1, "amount": 100}],
        "sharedWith": [1, 2],
    }],
})

summary = ExpenseService().calculate_summary(event)
for settlement in summary.settlements:
    print(settlement.from_name, "->", settlement.to_name, settlement.amount)
# Bob -> Alice 50.0
```

`event_from_dict` raises `ValueError` when a field has the wrong type. The
model classes are `Event`, `Participant`, `Expense`, `Payment`,
`ParticipantBalance`, `Settlement` and `Summary`. Each has a `to_dict()`
method that returns the JSON shape shown above, with camelCase keys.

### Storing events

`splitty.repository.InMemoryEventRepository` implements the abstract
`EventRepository` interface. It provides `save`, `find_by_id`, `delete` and
`find_all`:

- It stores copies of events, and it returns copies too.
- It is safe to use from several threads.
- Saving an event whose `id` is 0 assigns it a new id.
- Looking up or deleting an id that does not exist raises `EventNotFoundError`.

### Embedding the application

`splitty.server.create_app()` returns a WSGI application with CORS already
applied. You can mount it in any WSGI server.

To get the routes without CORS, use `splitty.api.setup_routes(handler)`. It
takes an `EventHandler` built from a repository and an `ExpenseService`.
`Application.dispatch(method, path, body)` routes a single request without a
server and returns a `Response` with `status`, `body` and `headers`.

## Limitations

- Events are kept only in memory. They are lost when the server stops, and
  there is no database or file storage.
- There is no authentication and no per-user data. Every client sees every
  event.