from rentboard.services.gateway import AggregationGateway


def get_gateway() -> AggregationGateway:
    return AggregationGateway()
