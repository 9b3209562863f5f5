# User-facing texts shown by the checkout block (buyer-facing locale is Russian).

NAME_LETTERS_ONLY = "В поле Имя и Фамилия доступны только буквы"

PHONE_HAS_LETTERS = "Номер телефона не должен содержать букв"
PHONE_PATTERN = "Номер должен начинаться с + и содержать минимум 12 цифр"

GATE_REQUIRED_DATA = "Пожалуйста, заполните все необходимые данные"

BANNER_TITLE = "checkout-ui"
ATTRIBUTE_CHANGES_NOT_SUPPORTED = "Изменение атрибутов заказа не поддерживается в этом оформлении заказа"
