"""
AI生成が使えない場合の、都市別の手書き旅程カタログ。
Hand-authored, location-keyed itineraries used when live generation fails.
"""

import copy
import logging
from typing import Any, Dict

from hangout.constants import DEFAULT_FALLBACK_LOCATION
from hangout.places import (
    CAFE_ATMOSPHERE,
    CITY_EXPLORATION,
    HISTORICAL_LANDMARKS,
    PEOPLE_ENJOYING_OUTINGS,
    RESTAURANT_DINING,
    STOCK_IMAGES,
)

logger = logging.getLogger(__name__)


def _img(category: str, index: int) -> str:
    return STOCK_IMAGES[category][index]


# キーの順番がそのまま照合順になる（最初に一致したものを採用）
# Key order is match order; the first key found in the location wins
FALLBACK_ITINERARIES: Dict[str, Dict[str, Any]] = {
    "noida": {
        "title": "A Relaxed Day Out in Noida",
        "description": "Birdwatching, mall cafes, a grand memorial at sunset and a rooftop dinner across Noida's best-connected sectors.",
        "location": "Noida",
        "activities": [
            {
                "id": "act1",
                "time": "8:00 AM",
                "title": "Morning Walk at Okhla Bird Sanctuary",
                "description": "Stroll the wetland trails on the Yamuna and spot migratory birds while the air is still cool.",
                "location": "Okhla Bird Sanctuary, Sector 95, Noida",
                "image": _img(CITY_EXPLORATION, 4),
                "price": "₹",
                "rating": "4.2 ★",
                "timeOfDay": "morning",
                "type": "exploring",
            },
            {
                "id": "act2",
                "time": "10:30 AM",
                "title": "Breakfast at Cafe Delhi Heights",
                "description": "Settle in for a hearty brunch and coffee at this popular all-day cafe inside DLF Mall of India.",
                "location": "DLF Mall of India, Sector 18, Noida",
                "image": _img(CAFE_ATMOSPHERE, 0),
                "price": "₹₹",
                "rating": "4.4 ★",
                "timeOfDay": "morning",
                "type": "cafe",
            },
            {
                "id": "act3",
                "time": "1:00 PM",
                "title": "Street Food Lunch in Atta Market",
                "description": "Work through chaat, momos and rolls from the busy stalls of Noida's oldest market square.",
                "location": "Atta Market, Sector 27, Noida",
                "image": _img(RESTAURANT_DINING, 2),
                "price": "₹",
                "rating": "4.3 ★",
                "timeOfDay": "afternoon",
                "type": "eating",
            },
            {
                "id": "act4",
                "time": "3:00 PM",
                "title": "Explore the Sector 18 Shopping District",
                "description": "Browse the boutiques and stores of Sector 18, the city's liveliest commercial hub.",
                "location": "Sector 18 Market, Noida",
                "image": _img(CITY_EXPLORATION, 0),
                "price": "₹₹",
                "rating": "4.1 ★",
                "timeOfDay": "afternoon",
                "type": "exploring",
            },
            {
                "id": "act5",
                "time": "6:00 PM",
                "title": "Sunset at Rashtriya Dalit Prerna Sthal",
                "description": "Walk among the sandstone monuments and elephant statues of this vast memorial park as the lights come on.",
                "location": "Rashtriya Dalit Prerna Sthal, Sector 95, Noida",
                "image": _img(HISTORICAL_LANDMARKS, 2),
                "price": "₹",
                "rating": "4.4 ★",
                "timeOfDay": "evening",
                "type": "historical",
            },
            {
                "id": "act6",
                "time": "8:00 PM",
                "title": "Dinner at Gardens Galleria",
                "description": "End the day with dinner and live music at one of the rooftop restaurants in this open-air mall.",
                "location": "Gardens Galleria, Sector 38A, Noida",
                "image": _img(RESTAURANT_DINING, 1),
                "price": "₹₹₹",
                "rating": "4.3 ★",
                "timeOfDay": "evening",
                "type": "eating",
            },
        ],
        "recommendations": [
            {
                "id": "rec1",
                "title": "Akshardham Temple Visit",
                "description": "Cross into East Delhi to see the intricately carved Akshardham complex and its evening water show.",
                "image": _img(HISTORICAL_LANDMARKS, 3),
                "rating": "4.8 ★",
                "duration": "Half day",
            },
            {
                "id": "rec2",
                "title": "Worlds of Wonder Amusement Park",
                "description": "Spend an afternoon on roller coasters and water rides at Noida's biggest amusement park.",
                "image": _img(PEOPLE_ENJOYING_OUTINGS, 1),
                "rating": "4.2 ★",
                "duration": "Full day",
            },
            {
                "id": "rec3",
                "title": "Greater Noida Expressway Cafe Trail",
                "description": "Hop between the new cafes and dessert bars along the expressway's growing food strip.",
                "image": _img(CAFE_ATMOSPHERE, 2),
                "rating": "4.1 ★",
                "duration": "3-4 hours",
            },
        ],
    },
    "jaipur": {
        "title": "Forts and Bazaars of the Pink City",
        "description": "Hilltop forts, royal palaces, old-city bazaars and a Rajasthani village dinner in one day around Jaipur.",
        "location": "Jaipur",
        "activities": [
            {
                "id": "act1",
                "time": "8:30 AM",
                "title": "Amber Fort",
                "description": "Climb the ramparts of this sandstone and marble fort before the midday heat and crowds arrive.",
                "location": "Devisinghpura, Amer, Jaipur",
                "image": _img(HISTORICAL_LANDMARKS, 0),
                "price": "₹₹",
                "rating": "4.7 ★",
                "timeOfDay": "morning",
                "type": "historical",
            },
            {
                "id": "act2",
                "time": "11:00 AM",
                "title": "Coffee at Tapri Central",
                "description": "Sip masala chai and snack on local bites on a rooftop overlooking Central Park.",
                "location": "B4-E, Prithviraj Road, C-Scheme, Jaipur",
                "image": _img(CAFE_ATMOSPHERE, 1),
                "price": "₹",
                "rating": "4.5 ★",
                "timeOfDay": "morning",
                "type": "cafe",
            },
            {
                "id": "act3",
                "time": "1:00 PM",
                "title": "Lunch at Laxmi Misthan Bhandar",
                "description": "Order a Rajasthani thali and the famous ghewar at this landmark sweet shop in Johari Bazaar.",
                "location": "Johari Bazaar Road, Jaipur",
                "image": _img(RESTAURANT_DINING, 0),
                "price": "₹₹",
                "rating": "4.3 ★",
                "timeOfDay": "afternoon",
                "type": "eating",
            },
            {
                "id": "act4",
                "time": "3:00 PM",
                "title": "City Palace and Hawa Mahal",
                "description": "Tour the royal courtyards of City Palace, then photograph the honeycomb facade of Hawa Mahal.",
                "location": "Jaleb Chowk, Tulsi Marg, Jaipur",
                "image": _img(HISTORICAL_LANDMARKS, 1),
                "price": "₹₹",
                "rating": "4.6 ★",
                "timeOfDay": "afternoon",
                "type": "historical",
            },
            {
                "id": "act5",
                "time": "5:30 PM",
                "title": "Sunset at Nahargarh Fort",
                "description": "Watch the whole Pink City glow from the walls of this fort on the Aravalli ridge.",
                "location": "Krishna Nagar, Brahampuri, Jaipur",
                "image": _img(CITY_EXPLORATION, 1),
                "price": "₹",
                "rating": "4.5 ★",
                "timeOfDay": "evening",
                "type": "exploring",
            },
            {
                "id": "act6",
                "time": "8:00 PM",
                "title": "Dinner at Chokhi Dhani",
                "description": "Enjoy folk dance, puppet shows and an unlimited Rajasthani dinner at this recreated village.",
                "location": "12 Mile, Tonk Road, Jaipur",
                "image": _img(RESTAURANT_DINING, 3),
                "price": "₹₹₹",
                "rating": "4.4 ★",
                "timeOfDay": "evening",
                "type": "eating",
            },
        ],
        "recommendations": [
            {
                "id": "rec1",
                "title": "Jal Mahal and Gaitore Ki Chhatriyan",
                "description": "See the palace floating on Man Sagar Lake and the carved royal cenotaphs nearby.",
                "image": _img(HISTORICAL_LANDMARKS, 2),
                "rating": "4.5 ★",
                "duration": "2-3 hours",
            },
            {
                "id": "rec2",
                "title": "Old City Food Walk",
                "description": "Taste pyaaz kachori, lassi and kulfi through the lanes around Bapu Bazaar.",
                "image": _img(RESTAURANT_DINING, 2),
                "rating": "4.7 ★",
                "duration": "3-4 hours",
            },
            {
                "id": "rec3",
                "title": "Day Trip to Sambhar Salt Lake",
                "description": "Drive out to India's largest inland salt lake for flamingos and wide open salt flats.",
                "image": _img(PEOPLE_ENJOYING_OUTINGS, 2),
                "rating": "4.3 ★",
                "duration": "Full day",
            },
        ],
    },
    "chandigarh": {
        "title": "Lakes and Gardens of Chandigarh",
        "description": "A lakeside morning, Nek Chand's sculpture garden, sector-style food stops and a laid-back evening in the City Beautiful.",
        "location": "Chandigarh",
        "activities": [
            {
                "id": "act1",
                "time": "7:30 AM",
                "title": "Sunrise at Sukhna Lake",
                "description": "Join the joggers and boaters on the promenade of this reservoir at the foot of the Shivaliks.",
                "location": "Sukhna Lake, Sector 1, Chandigarh",
                "image": _img(CITY_EXPLORATION, 2),
                "price": "Free",
                "rating": "4.6 ★",
                "timeOfDay": "morning",
                "type": "exploring",
            },
            {
                "id": "act2",
                "time": "9:30 AM",
                "title": "Rock Garden of Chandigarh",
                "description": "Wander through waterfalls and figures built from recycled waste by artist Nek Chand.",
                "location": "Uttar Marg, Sector 1, Chandigarh",
                "image": _img(HISTORICAL_LANDMARKS, 3),
                "price": "₹",
                "rating": "4.5 ★",
                "timeOfDay": "morning",
                "type": "historical",
            },
            {
                "id": "act3",
                "time": "1:00 PM",
                "title": "Lunch at Pal Dhaba",
                "description": "Tuck into butter chicken and tandoori rotis at this decades-old Punjabi dhaba.",
                "location": "SCO 2, Sector 28D, Chandigarh",
                "image": _img(RESTAURANT_DINING, 0),
                "price": "₹₹",
                "rating": "4.3 ★",
                "timeOfDay": "afternoon",
                "type": "eating",
            },
            {
                "id": "act4",
                "time": "3:00 PM",
                "title": "Coffee at Indian Coffee House",
                "description": "Take a break with filter coffee and dosa at this old-school cafe in the Sector 17 plaza.",
                "location": "SCO 12, Sector 17C, Chandigarh",
                "image": _img(CAFE_ATMOSPHERE, 3),
                "price": "₹",
                "rating": "4.2 ★",
                "timeOfDay": "afternoon",
                "type": "cafe",
            },
            {
                "id": "act5",
                "time": "5:30 PM",
                "title": "Zakir Hussain Rose Garden",
                "description": "Walk through Asia's largest rose garden with over a thousand varieties in bloom.",
                "location": "Sector 16, Chandigarh",
                "image": _img(CITY_EXPLORATION, 5),
                "price": "Free",
                "rating": "4.4 ★",
                "timeOfDay": "evening",
                "type": "exploring",
            },
            {
                "id": "act6",
                "time": "8:00 PM",
                "title": "Dinner at Virgin Courtyard",
                "description": "Finish with Italian dishes in the leafy courtyard of this well-loved Sector 7 restaurant.",
                "location": "SCO 1, Sector 7C, Chandigarh",
                "image": _img(RESTAURANT_DINING, 1),
                "price": "₹₹₹",
                "rating": "4.5 ★",
                "timeOfDay": "evening",
                "type": "eating",
            },
        ],
        "recommendations": [
            {
                "id": "rec1",
                "title": "Capitol Complex Heritage Tour",
                "description": "See Le Corbusier's UNESCO-listed Assembly, Secretariat and the Open Hand Monument.",
                "image": _img(HISTORICAL_LANDMARKS, 0),
                "rating": "4.6 ★",
                "duration": "2-3 hours",
            },
            {
                "id": "rec2",
                "title": "Day Trip to Kasauli",
                "description": "Head up into the hills for colonial churches, pine walks and views from Monkey Point.",
                "image": _img(PEOPLE_ENJOYING_OUTINGS, 3),
                "rating": "4.7 ★",
                "duration": "Full day",
            },
            {
                "id": "rec3",
                "title": "Morni Hills Escape",
                "description": "Picnic by the Tikkar Taal lakes in the only hill station in Haryana.",
                "image": _img(PEOPLE_ENJOYING_OUTINGS, 0),
                "rating": "4.4 ★",
                "duration": "Half day",
            },
        ],
    },
    "delhi": {
        "title": "Classic Delhi in a Day",
        "description": "Chai in Connaught Place, Mughal tombs, Old Delhi kebabs and an evening at India Gate.",
        "location": "Delhi",
        "activities": [
            {
                "id": "act1",
                "time": "9:00 AM",
                "title": "Morning Chai at Connaught Place",
                "description": "Start your day with a traditional chai and breakfast at one of the iconic cafes in this colonial-era shopping district.",
                "location": "Connaught Place, New Delhi",
                "image": _img(CAFE_ATMOSPHERE, 0),
                "price": "₹",
                "rating": "4.6 ★",
                "timeOfDay": "morning",
                "type": "cafe",
            },
            {
                "id": "act2",
                "time": "11:00 AM",
                "title": "Visit Humayun's Tomb",
                "description": "Explore this UNESCO World Heritage site with its stunning Mughal architecture and beautiful gardens.",
                "location": "Mathura Road, Nizamuddin, New Delhi",
                "image": _img(HISTORICAL_LANDMARKS, 0),
                "price": "₹₹",
                "rating": "4.8 ★",
                "timeOfDay": "morning",
                "type": "historical",
            },
            {
                "id": "act3",
                "time": "1:30 PM",
                "title": "Lunch at Karim's",
                "description": "Enjoy authentic Mughlai cuisine at this legendary restaurant known for its kebabs and curries.",
                "location": "16, Gali Kababian, Jama Masjid, Old Delhi",
                "image": _img(RESTAURANT_DINING, 0),
                "price": "₹₹",
                "rating": "4.7 ★",
                "timeOfDay": "afternoon",
                "type": "eating",
            },
            {
                "id": "act4",
                "time": "3:30 PM",
                "title": "Shop at Dilli Haat",
                "description": "Browse handcrafted items, textiles, and souvenirs from across India at this open-air market.",
                "location": "INA Market, New Delhi",
                "image": _img(CITY_EXPLORATION, 3),
                "price": "₹",
                "rating": "4.5 ★",
                "timeOfDay": "afternoon",
                "type": "exploring",
            },
            {
                "id": "act5",
                "time": "6:30 PM",
                "title": "Sunset at India Gate",
                "description": "Watch the sunset and see the monument beautifully lit up as evening falls.",
                "location": "Rajpath, New Delhi",
                "image": _img(HISTORICAL_LANDMARKS, 1),
                "price": "Free",
                "rating": "4.9 ★",
                "timeOfDay": "evening",
                "type": "historical",
            },
            {
                "id": "act6",
                "time": "8:00 PM",
                "title": "Dinner at Bukhara",
                "description": "Experience one of Delhi's finest dining venues known for its Northwest Frontier cuisine and tandoori dishes.",
                "location": "ITC Maurya, Diplomatic Enclave, Sardar Patel Marg",
                "image": _img(RESTAURANT_DINING, 1),
                "price": "₹₹₹",
                "rating": "4.8 ★",
                "timeOfDay": "evening",
                "type": "eating",
            },
        ],
        "recommendations": [
            {
                "id": "rec1",
                "title": "Historical Delhi Tour",
                "description": "A full-day tour covering Red Fort, Qutub Minar, and other historical monuments in Delhi.",
                "image": _img(HISTORICAL_LANDMARKS, 2),
                "rating": "4.7 ★",
                "duration": "Full day",
            },
            {
                "id": "rec2",
                "title": "Food Walk in Old Delhi",
                "description": "Sample the best street food Delhi has to offer in the narrow lanes of Chandni Chowk.",
                "image": _img(RESTAURANT_DINING, 2),
                "rating": "4.9 ★",
                "duration": "3-4 hours",
            },
            {
                "id": "rec3",
                "title": "Day Trip to Agra",
                "description": "Visit the magnificent Taj Mahal and Agra Fort on a day trip from Delhi.",
                "image": _img(HISTORICAL_LANDMARKS, 3),
                "rating": "4.8 ★",
                "duration": "Full day",
            },
        ],
    },
}


def match_fallback_key(location: str) -> str:
    """
    場所名に部分一致する最初のカタログキーを返す（一致なしはデフォルト都市）
    Return the first catalog key contained in the location, case-insensitively,
    or the default location's key when nothing matches.
    """
    lowered = (location or "").lower()
    for key in FALLBACK_ITINERARIES:
        if key in lowered:
            return key
    logger.info("No fallback itinerary for %r; using %s", location, DEFAULT_FALLBACK_LOCATION)
    return DEFAULT_FALLBACK_LOCATION


def get_fallback_itinerary(location: str) -> Dict[str, Any]:
    """
    場所に対応する手書き旅程のコピーを返す
    Return a copy of the hand-authored itinerary for the location.
    """
    return copy.deepcopy(FALLBACK_ITINERARIES[match_fallback_key(location)])
