import attrs


@attrs.frozen
class PaymentIntent:
    intent_id: str
    client_secret: str = attrs.field(repr=False)
