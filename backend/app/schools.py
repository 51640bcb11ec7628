"""
Liste statique des écoles connues, utilisée pour l'autocomplétion du formulaire.
L'ordre de la liste départage les suggestions de même score.
"""

KNOWN_SCHOOLS = [
    "Delhi Public School Guwahati",
    "Delhi Public School Narengi",
    "Don Bosco School Panbazar",
    "Don Bosco Senior Secondary School Maligaon",
    "Kendriya Vidyalaya Khanapara",
    "Kendriya Vidyalaya Maligaon",
    "Kendriya Vidyalaya IIT Guwahati",
    "Army Public School Narangi",
    "Maria's Public School",
    "Sarala Birla Gyan Jyoti",
    "Assam Jatiya Bidyalay",
    "Faculty Higher Secondary School",
    "Gurukul Grammar Senior Secondary School",
    "Holy Child School",
    "Jawahar Navodaya Vidyalaya Kamrup",
    "Sanskriti The Gurukul",
    "Salt Brook Academy",
    "South Point School",
    "Pragjyoti English School",
    "Royal Global School",
    "St. Mary's English High School",
    "Shrimanta Shankar Academy",
    "The Assam Valley School",
    "Little Flower School",
    "Kasturba Gandhi Balika Vidyalaya",
    "Cotton Collegiate Government Higher Secondary School",
    "Tarini Charan Girls' Higher Secondary School",
    "Sonaram Higher Secondary School",
    "Ram Krishna Mission Vidyalaya",
    "Axom Sarbajanin Bidyalay",
    "Modern English School",
    "Christ Jyoti School",
    "Srimanta Sankaradeva Vidyaniketan",
    "Nabajyoti Vidyapith",
    "Hindi High School of Guwahati",
    "Gurukul Academy for Girls and Boys",
]
