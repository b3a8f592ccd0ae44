from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from users.permissions import ReadOnlyOrDashboardUser
from .serializers import FoodItemSerializer
from .services import MenuService


class FoodItemViewSet(viewsets.ViewSet):
    """
    Menu items. Anyone may browse; dashboard users manage.

    Query params for list:
    - ?category=meals
    - ?available=true
    - ?search=dosa
    """

    permission_classes = [ReadOnlyOrDashboardUser]

    def list(self, request):
        params = request.query_params
        listing = MenuService.list_items(
            category=params.get("category"),
            available_only=params.get("available", "").lower() in ("1", "true", "yes"),
            search=params.get("search"),
        )
        return Response({
            "results": listing.items,
            "error": listing.error,
            "stale": listing.stale,
        })

    def retrieve(self, request, pk=None):
        return Response(FoodItemSerializer(MenuService.get_item(pk)).data)

    def create(self, request):
        serializer = FoodItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = MenuService.create_item(**serializer.validated_data)
        return Response(FoodItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        item = MenuService.get_item(pk)
        serializer = FoodItemSerializer(item, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        item = MenuService.update_item(pk, **serializer.validated_data)
        return Response(FoodItemSerializer(item).data)

    def update(self, request, pk=None):
        item = MenuService.get_item(pk)
        serializer = FoodItemSerializer(item, data=request.data)
        serializer.is_valid(raise_exception=True)
        item = MenuService.update_item(pk, **serializer.validated_data)
        return Response(FoodItemSerializer(item).data)

    def destroy(self, request, pk=None):
        MenuService.delete_item(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="toggle-availability")
    def toggle_availability(self, request, pk=None):
        item = MenuService.toggle_availability(pk)
        return Response(FoodItemSerializer(item).data)
