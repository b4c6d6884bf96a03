"""
Sample records used when a collection has never been stored locally
"""

SAMPLE_PROPERTIES = [
    {
        'id': 'prop-sample-1',
        'title': 'Casa con jardín en Cumbres',
        'description': 'Casa de dos plantas con jardín amplio y cochera techada.',
        'type': 'Casa',
        'operationType': 'Venta',
        'price': 4850000,
        'showPrice': True,
        'bedrooms': 3,
        'bathrooms': 2.5,
        'parkingSpaces': 2,
        'constructionArea': 220,
        'landArea': 300,
        'street': 'Paseo de los Leones',
        'neighborhood': 'Cumbres',
        'city': 'Monterrey',
        'state': 'Nuevo León',
        'lat': 25.7317,
        'lng': -100.4014,
        'amenities': ['Jardín', 'Cochera', 'Terraza'],
        'images': ['https://picsum.photos/seed/inverland1/800/600'],
        'mainPhotoIndex': 0,
    },
    {
        'id': 'prop-sample-2',
        'title': 'Departamento amueblado en el centro',
        'description': 'Departamento en piso alto con vista a la ciudad.',
        'type': 'Departamento',
        'operationType': 'Renta',
        'rentPrice': 18500,
        'showPrice': True,
        'bedrooms': 2,
        'bathrooms': 2,
        'constructionArea': 95,
        'floorNumber': 12,
        'buildingFloors': 20,
        'maintenanceFee': 1800,
        'neighborhood': 'Centro',
        'city': 'Monterrey',
        'state': 'Nuevo León',
        'lat': 25.6714,
        'lng': -100.3090,
        'amenities': ['Alberca', 'Gimnasio', 'Seguridad 24/7'],
        'images': [
            'https://picsum.photos/seed/inverland2/800/600',
            'https://picsum.photos/seed/inverland3/800/600',
        ],
        'mainPhotoIndex': 1,
    },
    {
        'id': 'prop-sample-3',
        'title': 'Terreno comercial sobre avenida',
        'description': 'Terreno plano con frente a avenida principal.',
        'type': 'Terreno',
        'operationType': 'Venta',
        'price': 7200000,
        'showPrice': False,
        'landArea': 1200,
        'landFront': 30,
        'landDepth': 40,
        'city': 'San Pedro Garza García',
        'state': 'Nuevo León',
        'amenities': [],
        'images': [],
    },
]

SAMPLE_CLIENTS = [
    {
        'id': 'client-sample-1',
        'name': 'María López',
        'email': 'maria.lopez@example.com',
        'phone': '8112345678',
        'leadSource': 'Facebook',
        'status': 'Nuevo',
        'createdAt': '2024-05-02T15:30:00+00:00',
    },
    {
        'id': 'client-sample-2',
        'name': 'Carlos Ramírez',
        'email': 'carlos.ramirez@example.com',
        'phone': '8187654321',
        'leadSource': 'Portal',
        'status': 'Contactado',
        'createdAt': '2024-05-10T18:00:00+00:00',
    },
]

SAMPLE_CAMPAIGNS = [
    {
        'id': 'campaign-sample-1',
        'name': 'Bienvenida a nuevos prospectos',
        'subject': 'Gracias por contactar a Inverland',
        'message': 'Conoce nuestras propiedades destacadas de esta semana.',
        'targetAudience': {'status': ['Nuevo'], 'leadSource': []},
        'status': 'Draft',
        'sentToCount': 0,
    },
]
