from pydantic import BaseModel


class GeoDistanceResult(BaseModel):
    distance_km: float
    distance_meters: float


class ServiceAreaResult(BaseModel):
    inside: bool
    distance_km: float
    radius_km: float


class ReverseGeocodeResult(BaseModel):
    lat: float
    lng: float
    address: str
