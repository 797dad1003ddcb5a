from typing import Dict, Optional, Tuple

from .models import CropRequirement

# Ranges are inclusive. temperature: °C daily mean; rainfall: mm over the next
# 7 days; seasonality: typical sowing months (north Indian plains).
_ROWS = [
    {"id":"wheat",    "names":{"english":"Wheat","hindi":"गेहूं"},
     "temperature_range":(10,25), "rainfall_range":(20,60),  "ph_range":(6.0,7.5),
     "texture":("loamy","clay-loam"),              "seasonality":("nov","dec","jan"),
     "rooting_depth":"medium", "notes":"Prefers cool growing conditions; moderate water needs."},
    {"id":"rice",     "names":{"english":"Rice","hindi":"चावल"},
     "temperature_range":(20,32), "rainfall_range":(60,150), "ph_range":(5.5,7.0),
     "texture":("clayey","clay-loam","silty"),     "seasonality":("jun","jul","aug"),
     "rooting_depth":"medium", "notes":"High water requirement; tolerant of flooding."},
    {"id":"maize",    "names":{"english":"Maize","hindi":"मक्का"},
     "temperature_range":(15,30), "rainfall_range":(40,100), "ph_range":(5.8,7.2),
     "texture":("loamy","sandy-loam"),             "seasonality":("jun","jul"),
     "rooting_depth":"deep",   "notes":"Requires well-drained soils; sensitive to waterlogging."},
    {"id":"soybean",  "names":{"english":"Soybean","hindi":"सोयाबीन"},
     "temperature_range":(24,32), "rainfall_range":(40,120), "ph_range":(6.0,7.5),
     "texture":("loamy","sandy-loam","clay-loam"), "seasonality":("jun","jul","aug","sep"),
     "rooting_depth":"medium", "notes":"Widely grown in Madhya Pradesh during kharif."},
    {"id":"chickpea", "names":{"english":"Chickpea","hindi":"चना"},
     "temperature_range":(10,28), "rainfall_range":(20,50),  "ph_range":(6.0,8.0),
     "texture":("sandy-loam","loamy"),             "seasonality":("nov","dec"),
     "rooting_depth":"deep",   "notes":"Drought tolerant legume."},
    {"id":"mustard",  "names":{"english":"Mustard","hindi":"सरसों"},
     "temperature_range":(10,25), "rainfall_range":(10,40),  "ph_range":(6.0,7.5),
     "texture":("loamy","sandy-loam"),             "seasonality":("oct","nov"),
     "rooting_depth":"deep",   "notes":"Rabi oilseed; manages on limited irrigation."},
    {"id":"cotton",   "names":{"english":"Cotton","hindi":"कपास"},
     "temperature_range":(21,32), "rainfall_range":(30,90),  "ph_range":(5.8,8.0),
     "texture":("clayey","clay-loam","loamy"),     "seasonality":("apr","may","jun"),
     "rooting_depth":"deep",   "notes":"Long duration; does best on deep black soils."},
    {"id":"groundnut","names":{"english":"Groundnut","hindi":"मूंगफली"},
     "temperature_range":(22,32), "rainfall_range":(25,75),  "ph_range":(6.0,7.0),
     "texture":("sandy","sandy-loam","loamy"),     "seasonality":("jun","jul"),
     "rooting_depth":"medium", "notes":"Needs loose, well-drained soil for pegging."},
    {"id":"pigeon-pea","names":{"english":"Pigeon pea","hindi":"अरहर"},
     "temperature_range":(20,32), "rainfall_range":(30,90),  "ph_range":(6.0,7.5),
     "texture":("loamy","sandy-loam","clay-loam"), "seasonality":("jun","jul"),
     "rooting_depth":"deep",   "notes":"Hardy pulse; often intercropped."},
    {"id":"sorghum",  "names":{"english":"Sorghum","hindi":"ज्वार"},
     "temperature_range":(20,34), "rainfall_range":(20,70),  "ph_range":(5.5,8.0),
     "texture":("loamy","sandy-loam","clay-loam","clayey"), "seasonality":("jun","jul","oct"),
     "rooting_depth":"deep",   "notes":"Tolerates heat and dry spells."},
]

CROPS: Tuple[CropRequirement, ...] = tuple(CropRequirement.model_validate(r) for r in _ROWS)

_BY_ID: Dict[str, CropRequirement] = {c.id: c for c in CROPS}


def get_crop(crop_id: str) -> Optional[CropRequirement]:
    return _BY_ID.get(crop_id)
