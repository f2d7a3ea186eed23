from lifetrack.dates import matches_month


def by_asset(asset_id: str):
    def _filter(record) -> bool:
        return record.asset_id == asset_id

    return _filter


def by_bucket(bucket_id: str):
    def _filter(record) -> bool:
        return record.bucket_id == bucket_id

    return _filter


def by_type(type_: str):
    def _filter(record) -> bool:
        return record.type == type_

    return _filter


def in_month(year: int, month0: int):
    def _filter(record) -> bool:
        return matches_month(record.date, year, month0)

    return _filter


def on_or_before(date_str: str):
    # zero-padded ISO dates compare correctly as strings
    def _filter(record) -> bool:
        return record.date <= date_str

    return _filter
