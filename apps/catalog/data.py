"""
Static catalog data: French household task templates, age milestones and
period rules.

Rows are validated when the catalog is built (see CatalogConfig.ready).
Ages are in years unless `age_unit` says otherwise.
"""

TEMPLATE_ROWS = [
    # -------------------------------------------------------------------------
    # School
    # -------------------------------------------------------------------------
    {
        "id": "school_supplies",
        "age_min": 3, "age_max": 17,
        "category": "school", "subcategory": "back_to_school",
        "title": "Acheter les fournitures scolaires",
        "description": "Liste des fournitures pour la rentrée",
        "cron": "0 0 15 8 *",
        "weight": 4, "days_before_deadline": 14,
        "period": "back_to_school", "critical": True, "priority": "high",
    },
    {
        "id": "canteen_registration",
        "age_min": 3, "age_max": 14,
        "category": "school", "subcategory": "registration",
        "title": "Inscription cantine",
        "description": "Inscrire l'enfant à la cantine scolaire",
        "cron": "0 0 25 8 *",
        "weight": 2, "days_before_deadline": 10,
        "period": "back_to_school", "critical": True, "priority": "high",
    },
    {
        "id": "after_school_registration",
        "age_min": 3, "age_max": 10,
        "category": "school", "subcategory": "registration",
        "title": "Inscription périscolaire",
        "description": "Inscrire aux activités périscolaires (garderie, étude)",
        "cron": "0 0 25 8 *",
        "weight": 2, "days_before_deadline": 10,
        "period": "back_to_school",
    },
    {
        "id": "school_bag",
        "age_min": 3, "age_max": 14,
        "category": "school",
        "title": "Préparer le cartable",
        "description": "Vérifier que le cartable est prêt pour le lendemain",
        "recurrence": {"frequency": "weekly", "byDayOfWeek": [1, 2, 4, 5]},
        "weight": 1, "priority": "low",
    },
    {
        "id": "liaison_book",
        "age_min": 3, "age_max": 14,
        "category": "school",
        "title": "Signer le carnet de liaison",
        "description": "Vérifier et signer les mots dans le carnet",
        "cron": "@weekly",
        "weight": 1, "days_before_deadline": 1, "priority": "low",
    },
    {
        "id": "parent_teacher_meeting",
        "age_min": 3, "age_max": 17,
        "category": "school",
        "title": "Réunion parents-professeurs",
        "description": "Assister à la réunion de rentrée",
        "cron": "0 0 20 9 *",
        "weight": 3, "days_before_deadline": 7,
        "period": "back_to_school",
    },
    {
        "id": "school_insurance",
        "age_min": 3, "age_max": 17,
        "category": "school", "subcategory": "administrative",
        "title": "Attestation d'assurance scolaire",
        "description": "Fournir l'attestation d'assurance à l'école",
        "weight": 2, "days_before_deadline": 7,
        "period": "back_to_school", "critical": True, "priority": "high",
    },
    {
        "id": "class_photos",
        "age_min": 3, "age_max": 10,
        "category": "school",
        "title": "Commander les photos de classe",
        "weight": 1, "days_before_deadline": 7,
        "period": "autumn_break", "priority": "low",
    },
    {
        "id": "report_card_review",
        "age_min": 6, "age_max": 17,
        "category": "school",
        "title": "Lire le bulletin trimestriel",
        "description": "Lire le bulletin et en parler avec l'enfant",
        "recurrence": {"frequency": "monthly", "interval": 3, "byDayOfMonth": [15]},
        "weight": 2, "days_before_deadline": 3,
    },
    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------
    {
        "id": "dentist_checkup",
        "age_min": 3, "age_max": 17,
        "category": "health",
        "title": "Rendez-vous chez le dentiste",
        "description": "Contrôle dentaire semestriel",
        "recurrence": {"frequency": "monthly", "interval": 6},
        "weight": 2, "days_before_deadline": 14,
    },
    {
        "id": "pediatrician_checkup",
        "age_min": 2, "age_max": 17,
        "category": "health",
        "title": "Visite annuelle chez le pédiatre",
        "description": "Bilan de santé annuel et mise à jour du carnet de santé",
        "recurrence": {"frequency": "yearly"},
        "weight": 2, "days_before_deadline": 30, "priority": "high",
    },
    {
        "id": "flu_vaccine",
        "age_min": 0, "age_max": 17,
        "category": "health",
        "title": "Vaccin contre la grippe",
        "description": "Uniquement si recommandé par le médecin",
        "weight": 2, "days_before_deadline": 14,
        "period": "autumn_break", "is_active": False,
    },
    {
        "id": "lice_check",
        "age_min": 3, "age_max": 10,
        "category": "health",
        "title": "Vérifier les poux",
        "recurrence": {"frequency": "weekly", "byDayOfWeek": [0]},
        "weight": 1, "priority": "low",
    },
    {
        "id": "eye_exam",
        "age_min": 6, "age_max": 6,
        "category": "health",
        "title": "Bilan visuel des 6 ans",
        "description": "Examen ophtalmologique conseillé avant le CP",
        "trigger_age_months": 72,
        "weight": 2, "days_before_deadline": 30,
    },
    # -------------------------------------------------------------------------
    # Administrative
    # -------------------------------------------------------------------------
    {
        "id": "caf_declaration",
        "age_min": 0, "age_max": 17,
        "category": "administrative",
        "title": "Déclaration trimestrielle CAF",
        "description": "Déclarer les ressources du trimestre",
        "cron": "0 0 1 1,4,7,10 *",
        "weight": 2, "days_before_deadline": 7,
        "critical": True, "priority": "high",
    },
    {
        "id": "tax_return_children",
        "age_min": 0, "age_max": 17,
        "category": "administrative",
        "title": "Déclarer les enfants aux impôts",
        "description": "Vérifier les parts fiscales et les frais de garde",
        "cron": "0 0 15 5 *",
        "weight": 3, "days_before_deadline": 21,
        "critical": True, "priority": "critical",
    },
    {
        "id": "school_grant",
        "age_min": 11, "age_max": 17,
        "category": "administrative",
        "title": "Demande de bourse scolaire",
        "weight": 3, "days_before_deadline": 14,
        "period": "spring",
    },
    {
        "id": "health_card_update",
        "age_min": 0, "age_max": 17,
        "category": "administrative",
        "title": "Mettre à jour la carte Vitale",
        "recurrence": {"frequency": "yearly"},
        "weight": 1, "days_before_deadline": 14, "priority": "low",
    },
    {
        "id": "passport_check",
        "age_min": 0, "age_max": 17,
        "category": "administrative",
        "title": "Vérifier la validité du passeport",
        "description": "Avant de réserver les vacances d'été",
        "weight": 2, "days_before_deadline": 30,
        "period": "spring",
    },
    # -------------------------------------------------------------------------
    # Daily life
    # -------------------------------------------------------------------------
    {
        "id": "bath_time",
        "age_min": 0, "age_max": 5,
        "category": "daily",
        "title": "Donner le bain",
        "recurrence": {"frequency": "daily"},
        "weight": 2, "priority": "low",
    },
    {
        "id": "homework_help",
        "age_min": 6, "age_max": 14,
        "category": "daily",
        "title": "Aider aux devoirs",
        "recurrence": {"frequency": "weekly", "byDayOfWeek": [1, 2, 4, 5]},
        "weight": 3,
    },
    {
        "id": "pocket_money",
        "age_min": 8, "age_max": 17,
        "category": "daily",
        "title": "Verser l'argent de poche",
        "cron": "0 0 1 * *",
        "weight": 1, "priority": "low",
    },
    # -------------------------------------------------------------------------
    # Social
    # -------------------------------------------------------------------------
    {
        "id": "birthday_party",
        "age_min": 1, "age_max": 12,
        "category": "social",
        "title": "Organiser l'anniversaire",
        "description": "Invitations, gâteau et cadeau",
        "recurrence": {"frequency": "yearly"},
        "weight": 4, "days_before_deadline": 30,
    },
    {
        "id": "christmas_gifts",
        "age_min": 0, "age_max": 17,
        "category": "social",
        "title": "Acheter les cadeaux de Noël",
        "weight": 4, "days_before_deadline": 21,
        "period": "christmas",
    },
    # -------------------------------------------------------------------------
    # Activities
    # -------------------------------------------------------------------------
    {
        "id": "activity_registration",
        "age_min": 4, "age_max": 17,
        "category": "activities",
        "title": "Inscription aux activités extrascolaires",
        "description": "Sport, musique, arts : forums des associations",
        "cron": "0 0 5 9 *",
        "weight": 3, "days_before_deadline": 14,
        "period": "back_to_school",
    },
    {
        "id": "summer_camp",
        "age_min": 6, "age_max": 17,
        "category": "activities",
        "title": "Réserver la colonie de vacances",
        "weight": 4, "days_before_deadline": 14,
        "period": "spring",
    },
    {
        "id": "swimming_lessons",
        "age_min": 4, "age_max": 8,
        "category": "activities",
        "title": "Inscrire aux cours de natation",
        "weight": 3, "days_before_deadline": 14,
    },
    # -------------------------------------------------------------------------
    # Logistics
    # -------------------------------------------------------------------------
    {
        "id": "weekly_menu",
        "age_min": 0, "age_max": 17,
        "category": "logistics",
        "title": "Préparer les menus de la semaine",
        "recurrence": {"frequency": "weekly", "byDayOfWeek": [6]},
        "weight": 2,
    },
    {
        "id": "sunscreen",
        "age_min": 0, "age_max": 17,
        "category": "logistics",
        "title": "Racheter de la crème solaire",
        "weight": 1, "days_before_deadline": 7,
        "period": "summer", "priority": "low",
    },
    {
        "id": "holiday_childcare",
        "age_min": 0, "age_max": 11,
        "category": "logistics",
        "title": "Organiser la garde pendant les vacances",
        "weight": 4, "days_before_deadline": 30,
        "period": "summer", "priority": "high",
    },
    {
        "id": "clothes_sorting",
        "age_min": 0, "age_max": 11,
        "category": "logistics",
        "title": "Trier les vêtements trop petits",
        "cron": "0 0 1 3,9 *",
        "weight": 2, "days_before_deadline": 7,
    },
    {
        "id": "diapers_restock",
        "age_min": 0, "age_max": 30, "age_unit": "months",
        "category": "logistics",
        "title": "Racheter des couches",
        "recurrence": {"frequency": "weekly"},
        "weight": 1, "priority": "low",
    },
    # -------------------------------------------------------------------------
    # Belgium
    # -------------------------------------------------------------------------
    {
        "id": "be_school_supplies",
        "country": "BE",
        "age_min": 3, "age_max": 17,
        "category": "school",
        "title": "Acheter les fournitures scolaires",
        "description": "Liste des fournitures pour la rentrée de septembre",
        "cron": "0 0 15 8 *",
        "weight": 4, "days_before_deadline": 14,
        "period": "back_to_school", "critical": True,
    },
]


def _vaccine(milestone_id, age_months, name_fr, name_en, tolerance=0, priority="critical",
             mandatory=True, reminders=(14, 7, 1)):
    return {
        "id": milestone_id,
        "type": "vaccine",
        "age_months": age_months,
        "tolerance": tolerance,
        "name": {"fr": name_fr, "en": name_en},
        "description": {
            "fr": f"{name_fr} : prendre rendez-vous chez le médecin ou à la PMI",
            "en": f"{name_en}: book an appointment with the doctor",
        },
        "countries": ["FR"],
        "priority": priority,
        "mandatory": mandatory,
        "reminders": list(reminders),
    }


VACCINES = [
    _vaccine("vac_dtcp_1", 2, "Vaccin DTP-Coqueluche-Hib (1ère dose)", "DTP-Whooping cough-Hib vaccine (1st dose)"),
    _vaccine("vac_hepb_1", 2, "Vaccin Hépatite B (1ère dose)", "Hepatitis B vaccine (1st dose)"),
    _vaccine("vac_pneumo_1", 2, "Vaccin Pneumocoque (1ère dose)", "Pneumococcal vaccine (1st dose)"),
    _vaccine("vac_dtcp_2", 4, "Vaccin DTP-Coqueluche-Hib (2ème dose)", "DTP-Whooping cough-Hib vaccine (2nd dose)"),
    _vaccine("vac_hepb_2", 4, "Vaccin Hépatite B (2ème dose)", "Hepatitis B vaccine (2nd dose)"),
    _vaccine("vac_pneumo_2", 4, "Vaccin Pneumocoque (2ème dose)", "Pneumococcal vaccine (2nd dose)"),
    _vaccine("vac_meningo_1", 5, "Vaccin Méningocoque C (1ère dose)", "Meningococcal C vaccine (1st dose)"),
    _vaccine("vac_dtcp_3", 11, "Vaccin DTP-Coqueluche-Hib (rappel)", "DTP-Whooping cough-Hib vaccine (booster)"),
    _vaccine("vac_hepb_3", 11, "Vaccin Hépatite B (3ème dose)", "Hepatitis B vaccine (3rd dose)"),
    _vaccine("vac_pneumo_3", 11, "Vaccin Pneumocoque (rappel)", "Pneumococcal vaccine (booster)"),
    _vaccine("vac_ror_1", 12, "Vaccin ROR (1ère dose)", "MMR vaccine (1st dose)"),
    _vaccine("vac_meningo_2", 12, "Vaccin Méningocoque C (rappel)", "Meningococcal C vaccine (booster)"),
    _vaccine("vac_ror_2", 17, "Vaccin ROR (2ème dose)", "MMR vaccine (2nd dose)", tolerance=1),
    _vaccine("vac_dtp_rappel_6", 72, "Vaccin DTP (rappel 6 ans)", "DTP vaccine (6-year booster)",
             tolerance=2, priority="high", reminders=(30, 14, 7)),
    _vaccine("vac_dtcp_rappel_11", 132, "Vaccin dTcP (rappel 11-13 ans)", "dTaP vaccine (11-13 year booster)",
             tolerance=12, priority="high", reminders=(30, 14, 7)),
    _vaccine("vac_hpv", 132, "Vaccin HPV (papillomavirus)", "HPV vaccine (human papillomavirus)",
             tolerance=12, priority="high", mandatory=False, reminders=(30, 14, 7)),
]


def _milestone(milestone_id, milestone_type, age_months, name_fr, name_en, tolerance, priority,
               mandatory, reminders, description_fr="", description_en=""):
    return {
        "id": milestone_id,
        "type": milestone_type,
        "age_months": age_months,
        "tolerance": tolerance,
        "name": {"fr": name_fr, "en": name_en},
        "description": {"fr": description_fr, "en": description_en},
        "countries": ["FR"],
        "priority": priority,
        "mandatory": mandatory,
        "reminders": list(reminders),
    }


HEALTH_CHECKUPS = [
    _milestone("pmi_8j", "health_checkup", 0, "Examen des 8 premiers jours", "8-day checkup",
               0, "critical", True, (3, 1),
               "Premier examen médical obligatoire dans les 8 jours suivant la naissance",
               "First mandatory medical examination within 8 days of birth"),
    _milestone("pmi_1m", "health_checkup", 1, "Visite PMI du 1er mois", "1-month PMI visit",
               0, "high", False, (7, 3)),
    _milestone("pmi_2m", "health_checkup", 2, "Examen du 2ème mois", "2-month examination",
               0, "critical", True, (14, 7, 3)),
    _milestone("pmi_4m", "health_checkup", 4, "Examen du 4ème mois", "4-month examination",
               0, "critical", True, (14, 7, 3)),
    _milestone("pmi_9m", "health_checkup", 9, "Examen du 9ème mois", "9-month examination",
               0, "critical", True, (14, 7, 3)),
    _milestone("pmi_12m", "health_checkup", 12, "Examen des 12 mois", "12-month examination",
               0, "high", False, (14, 7, 3)),
    _milestone("pmi_24m", "health_checkup", 24, "Examen des 24 mois", "24-month examination",
               0, "critical", True, (14, 7, 3)),
]

SCHOOL_MILESTONES = [
    _milestone("school_maternelle_inscription", "registration", 30, "Inscription maternelle",
               "Preschool registration", 3, "critical", True, (60, 30, 14),
               "Inscrire l'enfant à la mairie puis à l'école", "Register at the town hall, then at school"),
    _milestone("school_maternelle_rentree", "transition", 36, "Rentrée en maternelle",
               "Start of preschool", 1, "high", True, (30, 14, 7, 1)),
    _milestone("school_cp_inscription", "registration", 66, "Inscription CP / école primaire",
               "Elementary school registration", 3, "high", False, (60, 30, 14)),
    _milestone("school_cp_rentree", "transition", 72, "Rentrée au CP", "Start of 1st grade",
               1, "high", True, (30, 14, 7, 1)),
    _milestone("school_college_inscription", "registration", 126, "Inscription collège (6ème)",
               "Middle school registration (6th grade)", 3, "critical", True, (90, 60, 30, 14)),
    _milestone("school_college_rentree", "transition", 132, "Rentrée au collège", "Start of middle school",
               1, "high", True, (30, 14, 7, 1)),
    _milestone("school_brevet_preparation", "preparation", 174, "Préparation brevet des collèges",
               "National exam preparation", 3, "high", True, (90, 60, 30)),
    _milestone("school_lycee_orientation", "administrative", 174, "Orientation lycée (voeux)",
               "High school orientation", 3, "critical", True, (90, 60, 30, 14)),
    _milestone("school_lycee_inscription", "registration", 177, "Inscription lycée",
               "High school registration", 3, "critical", True, (60, 30, 14)),
    _milestone("school_bac_preparation", "preparation", 204, "Préparation baccalauréat",
               "Baccalaureate preparation", 6, "high", True, (90, 60, 30)),
    _milestone("school_bac_inscription", "registration", 207, "Inscription au baccalauréat",
               "Baccalaureate registration", 2, "critical", True, (30, 14, 7)),
    _milestone("school_parcoursup_inscription", "registration", 208, "Inscription Parcoursup",
               "Parcoursup registration", 1, "critical", True, (30, 14, 7, 3)),
    _milestone("school_parcoursup_voeux", "registration", 209, "Voeux Parcoursup",
               "Parcoursup choices", 1, "critical", True, (30, 14, 7, 3)),
]

ADMINISTRATIVE_MILESTONES = [
    _milestone("admin_carte_identite", "administrative", 0, "Carte d'identité bébé", "Baby ID card",
               3, "medium", False, (14, 7)),
    _milestone("admin_passeport_enfant", "administrative", 0, "Passeport bébé", "Baby passport",
               3, "medium", False, (30, 14)),
    _milestone("admin_aac_inscription", "activity", 180, "Inscription AAC (conduite accompagnée)",
               "Accompanied driving registration", 2, "medium", False, (30, 14)),
    _milestone("admin_code_route", "activity", 180, "Inscription code de la route",
               "Driving theory registration", 12, "medium", False, (30, 14)),
    _milestone("admin_carte_vitale", "administrative", 192, "Carte Vitale personnelle",
               "Personal health card", 2, "high", True, (30, 14, 7)),
    _milestone("admin_jdc", "administrative", 192, "Journée Défense et Citoyenneté (JDC)",
               "Defense and Citizenship Day", 12, "high", True, (60, 30, 14),
               "Convocation et participation à la JDC (obligatoire)",
               "Convocation and participation in Defense Day (mandatory)"),
    _milestone("admin_permis_18", "activity", 216, "Passage du permis de conduire", "Driving test",
               2, "medium", False, (60, 30, 14)),
]

MILESTONE_ROWS = VACCINES + HEALTH_CHECKUPS + SCHOOL_MILESTONES + ADMINISTRATIVE_MILESTONES


def _period_rule(rule_id, period_type, month, name_fr, name_en, description_fr, description_en,
                 category, priority, lead_days, age_range=None, countries=("FR",), tags=(), **trigger):
    return {
        "id": rule_id,
        "period_type": period_type,
        "month": month,
        "name": {"fr": name_fr, "en": name_en},
        "description": {"fr": description_fr, "en": description_en},
        "category": category,
        "priority": priority,
        "lead_days": lead_days,
        "age_range": age_range,
        "countries": list(countries),
        "tags": list(tags),
        **trigger,
    }


# Calendar-triggered tasks; ages in months
PERIOD_RULE_ROWS = [
    _period_rule("rentree_certificat_medical", "rentree", 9,
                 "Certificat médical sport", "Sports medical certificate",
                 "Obtenir un certificat médical pour les activités sportives",
                 "Get a medical certificate for sports activities",
                 "health", "high", 14, (36, 216), tags=("rentree", "sport", "medical")),
    _period_rule("christmas_cadeaux_liste", "christmas", 11,
                 "Liste de cadeaux de Noël", "Christmas gift list",
                 "Demander et compiler la liste de cadeaux des enfants",
                 "Ask for and compile children's gift lists",
                 "activities", "medium", 30, (24, 168), ("FR", "BE", "CH", "CA"), ("noel", "cadeaux")),
    _period_rule("christmas_spectacle_ecole", "christmas", 12,
                 "Spectacle de Noël école", "School Christmas show",
                 "Assister au spectacle de Noël de l'école", "Attend school Christmas show",
                 "school", "medium", 7, (36, 144), tags=("noel", "ecole", "spectacle"), week_of_month=2),
    _period_rule("january_renouvellement_activites", "annual", 1,
                 "Renouvellement activités", "Activity renewal",
                 "Confirmer ou modifier les inscriptions aux activités pour le 2ème semestre",
                 "Confirm or modify activity registrations for second semester",
                 "administrative", "medium", 14, (36, 216), tags=("activites", "inscription")),
    _period_rule("january_declaration_impots_prep", "annual", 1,
                 "Rassembler documents impôts", "Gather tax documents",
                 "Commencer à rassembler les documents pour la déclaration d'impôts (garde d'enfants, etc.)",
                 "Start gathering documents for tax return (childcare, etc.)",
                 "administrative", "medium", 7, tags=("impots", "administratif")),
    _period_rule("spring_inscriptions_prochaine_annee", "spring", 3,
                 "Inscriptions année prochaine", "Next year registrations",
                 "Procéder aux inscriptions scolaires pour l'année prochaine",
                 "Complete school registrations for next year",
                 "administrative", "critical", 30, (24, 204), tags=("inscription", "ecole", "rentree")),
    _period_rule("june_spectacle_fin_annee", "end_of_year", 6,
                 "Spectacle de fin d'année", "End of year show",
                 "Assister au spectacle de fin d'année de l'école", "Attend school end-of-year show",
                 "school", "medium", 7, (36, 144), tags=("ecole", "spectacle"), week_of_month=3),
    _period_rule("june_cadeaux_maitresse", "end_of_year", 6,
                 "Cadeau maîtresse/professeur", "Teacher gift",
                 "Organiser et acheter le cadeau de fin d'année pour l'enseignant",
                 "Organize and buy end-of-year gift for teacher",
                 "school", "low", 14, (36, 144), tags=("ecole", "cadeau")),
    _period_rule("summer_centres_loisirs", "summer", 5,
                 "Inscription centres de loisirs", "Day camp registration",
                 "Inscrire les enfants aux centres de loisirs pour l'été",
                 "Register children for summer day camps",
                 "activities", "high", 45, (36, 144), tags=("vacances", "ete", "centres_loisirs")),
    _period_rule("summer_cahier_vacances", "summer", 6,
                 "Acheter cahier de vacances", "Buy vacation workbook",
                 "Acheter un cahier de vacances pour maintenir les acquis",
                 "Buy vacation workbook to maintain skills",
                 "school", "low", 14, (60, 168), tags=("vacances", "cahier")),
    _period_rule("monthly_check_fournitures", "monthly", 1,
                 "Vérifier fournitures scolaires", "Check school supplies",
                 "Vérifier et réapprovisionner les fournitures scolaires si nécessaire",
                 "Check and restock school supplies if needed",
                 "school", "low", 0, (36, 216), ("FR", "BE", "CH", "CA"), ("fournitures", "ecole"),
                 day_of_month=1, recurrence="monthly"),
]
